"""
The game reducer is the entrypoint into the domain layer for the service layer.

Every function takes a GameState and returns the next one. A turn is:
1. apply_move: the move itself (captures, traps, power-up pickup, whose turn it is next)
2. advance_turn_mechanics: everything the clock drives (shrinking, power-ups, ageing, respawns)
3. evaluate_game_over: checkmate / stalemate / a king gone missing

Nothing in here raises: a request that does not fit the state returns the state unchanged.
The service layer decides how to report that to the player.
"""

import logging

from src.core.shared_types import Color, GamePhase, Outcome
from src.royale.events import GameEvent, Notifier, emit, no_op
from src.royale.legal_moves import find_legal_move, legal_moves
from src.royale.moves import Move
from src.royale.pieces import Piece
from src.royale.position import Position
from src.royale.powerups import (
    collect_power_up,
    spawn_power_ups,
    update_power_ups,
    update_shields,
    use_power_up,
)
from src.royale.randomness import RandomSource
from src.royale.respawn import advance_respawn, build_respawn_queue
from src.royale.shrink import advance_shrink_schedule
from src.royale.state import GameState, create_initial_game_state
from src.royale.transformation import age_pieces, process_transformations

logger = logging.getLogger(__name__)

__all__ = [
    "advance_turn_mechanics",
    "apply_move",
    "create_initial_game_state",
    "evaluate_game_over",
    "legal_moves",
    "pass_turn",
    "play_turn",
    "use_power_up",
]


# --- THE MOVE ---
def _record_capture(state: GameState, captured_piece: Piece) -> GameState:
    captured_pieces = state.captured_pieces + (captured_piece,)
    return state.evolve(
        captured_pieces=captured_pieces,
        respawn_queue=build_respawn_queue(captured_pieces),
    )


def _trigger_trap(
    state: GameState, square: Position, mover: Color, notify: Notifier
) -> GameState:
    """
    An enemy trap on the arrival square captures the piece that just arrived. The trap is used up.
    A shielded piece walks over it and the trap stays armed.
    """
    if state.trap_squares.get(square.key) != mover.opponent:
        return state

    trapped_piece = state.board.piece(square)
    assert trapped_piece is not None
    if state.is_shielded(trapped_piece):
        return state
    traps = {key: owner for key, owner in state.trap_squares.items() if key != square.key}
    state = state.evolve(board=state.board.remove_piece(square), trap_squares=traps)
    emit(notify, GameEvent.TRAP_TRIGGERED)
    return _record_capture(state, trapped_piece)


def _hand_over_turn(state: GameState, mover: Color) -> GameState:
    """Next player, unless the mover armed an extra move (which is used up now)"""
    if mover in state.extra_moves:
        return state.evolve(extra_moves=state.extra_moves - {mover})
    return state.evolve(current_player=mover.opponent)


def apply_move(state: GameState, move: Move, notify: Notifier = no_op) -> GameState:
    """
    Play a move for the player whose turn it is.
    ----

    The move is ignored (same state returned) if the game is over, it is not the mover's turn, the piece is not
    where the move says it is, or the move is not legal. Otherwise:
    * the piece moves (has_moved set, its still-standing counter reset), a captured piece is queued for respawn
    * an enemy trap on the arrival square captures the piece
    * a power-up on the arrival square is collected
    * an armed teleport is spent by a teleport move
    * the turn passes to the opponent, unless an extra move was armed
    """
    if not state.is_playing or move.piece.color != state.current_player:
        return state

    legal_move = find_legal_move(state, move)
    if legal_move is None:
        logger.debug("Rejected move %s for %s", move.to_algebraic(), state.current_player)
        return state

    mover = legal_move.piece.color
    board = state.board.move_piece(legal_move).place_piece(
        legal_move.piece.after_move(), legal_move.to_square
    )
    state = state.evolve(board=board)
    if legal_move.captured is not None:
        state = _record_capture(state, legal_move.captured)

    state = _trigger_trap(state, legal_move.to_square, mover, notify)
    if state.board.piece(legal_move.to_square) is not None:
        state = collect_power_up(state, legal_move.to_square, mover, notify)

    if legal_move.used_power_up is not None:
        state = state.evolve(
            teleports={color: item for color, item in state.teleports.items() if color != mover}
        )

    state = _hand_over_turn(state, mover)
    state = state.evolve(turn_count=state.turn_count + 1, last_move=legal_move)

    if state.board.is_check(mover.opponent, state.shrunk_squares):
        emit(notify, GameEvent.CHECK)
    return state


def pass_turn(state: GameState, notify: Notifier = no_op) -> GameState:
    """The player to move has nothing to play: hand the turn over without touching the board or the clock"""
    if not state.is_playing:
        return state
    logger.info("%s has no legal move, passing the turn", state.current_player)
    emit(notify, GameEvent.TURN_PASSED)
    return state.evolve(current_player=state.current_player.opponent)


# --- THE CLOCK ---
def advance_turn_mechanics(
    state: GameState, rng: RandomSource, notify: Notifier = no_op
) -> GameState:
    """Once per completed move, always in this order"""
    state = advance_shrink_schedule(state, notify)
    state = update_power_ups(state)
    state = spawn_power_ups(state, rng, notify)
    state = update_shields(state)
    state = age_pieces(state)
    state = process_transformations(state, rng, notify)
    return advance_respawn(state, rng, notify)


# --- END OF THE GAME ---
def _finish(state: GameState, winner: Outcome) -> GameState:
    return state.evolve(game_phase=GamePhase.GAME_OVER, winner=winner)


def _is_checkmated(state: GameState, color: Color) -> bool:
    return state.board.is_check(color, state.shrunk_squares) and not legal_moves(state, color)


def _is_stalemated(state: GameState, color: Color) -> bool:
    return not state.board.is_check(color, state.shrunk_squares) and not legal_moves(
        state, color
    )


def evaluate_game_over(state: GameState, notify: Notifier = no_op) -> GameState:
    """
    Decide whether the game just ended.
    ---

    1. a king is missing (captured by a trap): its side lost. Both gone: draw.
    2. either side checkmated: the other side wins.
    3. the side to move has no legal move and is not in check: draw.

    A finished game stays finished: evaluating it again changes nothing.
    """
    if not state.is_playing:
        return state

    missing_kings = [color for color in Color if state.board.locate_king(color) is None]
    if missing_kings:
        if len(missing_kings) == len(Color):
            return _finish(state, Outcome.DRAW)
        return _finish(state, Outcome(missing_kings[0].opponent.value))

    for color in (state.current_player, state.current_player.opponent):
        if _is_checkmated(state, color):
            emit(notify, GameEvent.CHECKMATE)
            return _finish(state, Outcome(color.opponent.value))

    if _is_stalemated(state, state.current_player):
        emit(notify, GameEvent.STALEMATE)
        return _finish(state, Outcome.DRAW)
    return state


def play_turn(
    state: GameState, move: Move, rng: RandomSource, notify: Notifier = no_op
) -> GameState:
    """A complete turn. A rejected move leaves everything as it was (the clock does not tick)."""
    after_move = apply_move(state, move, notify)
    if after_move is state:
        return state
    after_mechanics = advance_turn_mechanics(after_move, rng, notify)
    return evaluate_game_over(after_mechanics, notify)

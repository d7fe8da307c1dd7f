"""
Power-ups
----

* Spawn: every `power_up_interval` turns, one power-up for every color that still has pieces on the board.
* Despawn: each power-up lives `power_up_lifetime` turns on the board.
* Collect: moving onto a power-up picks it up, unless you already hold one (one at a time).
* Use: the holder spends it explicitly. The effect depends on the type (see POWER_UP_EFFECTS).
"""

import logging
from dataclasses import replace
from typing import Callable, Optional

from src.core.shared_types import Color, PowerUpType
from src.royale.events import GameEvent, Notifier, emit, no_op
from src.royale.moves import Move
from src.royale.position import ALL_POSITIONS, Position
from src.royale.randomness import RandomSource, choose
from src.royale.rules import leaves_king_in_check
from src.royale.state import GameState, PowerUp

logger = logging.getLogger(__name__)

POWER_UP_DESCRIPTIONS: dict[PowerUpType, str] = {
    PowerUpType.TELEPORT: "TELEPORT: Move any of your pieces to any free square!",
    PowerUpType.SHIELD: "SHIELD: Protect a piece from capture for a few turns!",
    PowerUpType.EXTRA_MOVE: "EXTRA MOVE: Take another turn immediately!",
    PowerUpType.TRAP: "TRAP: Set a trap that captures the next enemy piece to step on it!",
}


def description(power_up_type: PowerUpType) -> str:
    return POWER_UP_DESCRIPTIONS[power_up_type]


# --- SPAWNING / DESPAWNING ---
def _is_near_king(state: GameState, square: Position) -> bool:
    return any(square.is_adjacent_or_same(king) for king in state.board.kings())


def safe_power_up_squares(state: GameState) -> list[Position]:
    """Empty squares still in play, without a power-up and not next to any king"""
    return [
        square
        for square in ALL_POSITIONS
        if not state.is_shrunk(square)
        and state.board.is_empty(square)
        and state.power_up_at(square) is None
        and not _is_near_king(state, square)
    ]


def is_spawn_turn(state: GameState) -> bool:
    return state.turn_count > 0 and state.turn_count % state.config.power_up_interval == 0


def spawn_power_ups(
    state: GameState, rng: RandomSource, notify: Notifier = no_op
) -> GameState:
    """One new power-up per color with pieces on the board. No square left? Then nothing spawns."""
    if not is_spawn_turn(state):
        return state

    for index, _ in enumerate(state.board.colors_present()):
        power_up_type = choose(rng, list(PowerUpType))
        square = choose(rng, safe_power_up_squares(state))
        if square is None or power_up_type is None:
            logger.debug("No free square for a power-up on turn %d", state.turn_count)
            break

        power_up = PowerUp(
            identity=f"power-up-{state.turn_count}-{index}",
            type=power_up_type,
            position=square,
            turns_until_despawn=state.config.power_up_lifetime,
        )
        state = state.evolve(power_ups=state.power_ups + (power_up,))
        emit(notify, GameEvent.POWER_UP_SPAWNED)
    return state


def update_power_ups(state: GameState) -> GameState:
    """Age the power-ups lying on the board. The ones whose time is up disappear."""
    power_ups = tuple(
        replace(power_up, turns_until_despawn=power_up.turns_until_despawn - 1)
        for power_up in state.power_ups
    )
    return state.evolve(
        power_ups=tuple(power_up for power_up in power_ups if power_up.turns_until_despawn > 0)
    )


def update_shields(state: GameState) -> GameState:
    shielded = {
        identity: turns_left - 1 for identity, turns_left in state.shielded_pieces.items()
    }
    return state.evolve(
        shielded_pieces={
            identity: turns_left for identity, turns_left in shielded.items() if turns_left > 0
        }
    )


def turns_until_next_spawn(state: GameState) -> int:
    interval = state.config.power_up_interval
    return interval - state.turn_count % interval


# --- COLLECTING ---
def collect_power_up(
    state: GameState, square: Position, color: Color, notify: Notifier = no_op
) -> GameState:
    """Pick up the power-up on the square. If you already hold one, it stays on the board."""
    power_up = state.power_up_at(square)
    if power_up is None:
        return state

    if state.held_power_up(color) is not None:
        return state

    player_power_ups = dict(state.player_power_ups)
    player_power_ups[color] = power_up
    emit(notify, GameEvent.POWER_UP_COLLECTED)
    return state.evolve(
        power_ups=tuple(item for item in state.power_ups if item != power_up),
        player_power_ups=player_power_ups,
    )


# --- USING ---
def _apply_shield(
    state: GameState, color: Color, power_up: PowerUp, target: Optional[Position]
) -> Optional[GameState]:
    """Protect one of your own pieces from capture for `shield_duration` turns"""
    piece = state.board.piece(target) if target is not None else None
    if piece is None or piece.color != color:
        return None
    shielded = dict(state.shielded_pieces)
    shielded[piece.identity] = state.config.shield_duration
    return state.evolve(shielded_pieces=shielded)


def _apply_trap(
    state: GameState, color: Color, power_up: PowerUp, target: Optional[Position]
) -> Optional[GameState]:
    """Hide a trap on an empty square: the next enemy piece to arrive there gets captured"""
    if target is None or not target.is_within_bounds():
        return None
    if state.is_shrunk(target) or not state.board.is_empty(target):
        return None
    if target.key in state.trap_squares:
        return None
    traps = dict(state.trap_squares)
    traps[target.key] = color
    return state.evolve(trap_squares=traps)


def _apply_extra_move(
    state: GameState, color: Color, power_up: PowerUp, target: Optional[Position]
) -> Optional[GameState]:
    """Your next move does not hand the turn over to the opponent"""
    return state.evolve(extra_moves=state.extra_moves | {color})


def _apply_teleport(
    state: GameState, color: Color, power_up: PowerUp, target: Optional[Position]
) -> Optional[GameState]:
    """Your next move may take one piece to any free square (see `teleport_moves`)"""
    teleports = dict(state.teleports)
    teleports[color] = power_up
    return state.evolve(teleports=teleports)


# -- STRATEGY PATTERN: POWER-UP EFFECTS --- (None: effect could not be applied with this target)
PowerUpEffectFn = Callable[
    [GameState, Color, PowerUp, Optional[Position]], Optional[GameState]
]
POWER_UP_EFFECTS: dict[PowerUpType, PowerUpEffectFn] = {
    PowerUpType.SHIELD: _apply_shield,
    PowerUpType.TRAP: _apply_trap,
    PowerUpType.EXTRA_MOVE: _apply_extra_move,
    PowerUpType.TELEPORT: _apply_teleport,
}


def use_power_up(
    state: GameState,
    color: Color,
    power_up_type: PowerUpType,
    target: Optional[Position] = None,
    notify: Notifier = no_op,
) -> GameState:
    """
    Spend the held power-up.
    ----

    Only on your own turn, while the game is on, and only if you hold a power-up of that type.
    `target` is the own piece to shield / the square to trap. Teleport and extra move need no target.
    Anything that does not fit leaves the state unchanged (and the power-up in your hand).
    """
    if not state.is_playing or state.current_player != color:
        return state

    held = state.held_power_up(color)
    if held is None or held.type != power_up_type:
        return state

    new_state = POWER_UP_EFFECTS[power_up_type](state, color, held, target)
    if new_state is None:
        logger.debug("Cannot use %s on %s", power_up_type, target)
        return state

    player_power_ups = dict(new_state.player_power_ups)
    player_power_ups[color] = None
    emit(notify, GameEvent.POWER_UP_USED)
    return new_state.evolve(player_power_ups=player_power_ups)


def teleport_moves(state: GameState, color: Color) -> list[Move]:
    """
    With a teleport armed, any own piece may jump to any empty square still in play.
    The usual rule still applies: the move cannot leave your own king in check.
    """
    power_up = state.teleports.get(color)
    if power_up is None:
        return []

    destinations = [
        square
        for square in ALL_POSITIONS
        if not state.is_shrunk(square) and state.board.is_empty(square)
    ]
    moves: list[Move] = []
    for from_square in state.board.locate_color(color):
        piece = state.board.piece(from_square)
        assert piece is not None
        for to_square in destinations:
            move = Move(from_square, to_square, piece, used_power_up=power_up)
            if not leaves_king_in_check(state.board, move, state.shrunk_squares):
                moves.append(move)
    return moves

"""
Respawn queue
----

Captured pieces are owed back to their owner. The queue alternates White/Black so both sides get the same
number of respawn chances, no matter who lost more material. Every `respawn_interval` turns the head of the
queue comes back as a piece of a random type (the original type does not matter) on a random safe square.
"""

import logging
from typing import Sequence

from src.core.shared_types import Color
from src.royale.events import GameEvent, Notifier, emit, no_op
from src.royale.pieces import Piece
from src.royale.position import ALL_POSITIONS, Position
from src.royale.randomness import RandomSource, choose, weighted_choice
from src.royale.state import GameState, PowerUp, RespawnEntry

logger = logging.getLogger(__name__)


def build_respawn_queue(captured_pieces: Sequence[Piece]) -> tuple[RespawnEntry, ...]:
    """
    Interleave the captured pieces of both colors: W1, B1, W2, B2, ...
    Once one color runs out, the remaining pieces of the other color follow in capture order.
    """
    captured_by_color: dict[Color, list[Piece]] = {
        color: [piece for piece in captured_pieces if piece.color == color]
        for color in (Color.WHITE, Color.BLACK)
    }
    most_captured = max(len(pieces) for pieces in captured_by_color.values())

    queue: list[RespawnEntry] = []
    for index in range(most_captured):
        for color, pieces in captured_by_color.items():
            if index < len(pieces):
                queue.append(RespawnEntry(owner=color, piece=pieces[index]))
    return tuple(queue)


def _is_near_power_up(square: Position, power_ups: Sequence[PowerUp]) -> bool:
    return any(square.is_adjacent_or_same(power_up.position) for power_up in power_ups)


def safe_spawn_squares(state: GameState) -> list[Position]:
    """Squares still in play, empty and not next to (or on) a power-up"""
    return [
        square
        for square in ALL_POSITIONS
        if not state.is_shrunk(square)
        and state.board.is_empty(square)
        and not _is_near_power_up(square, state.power_ups)
    ]


def respawned_identity(original: Piece, turn_count: int) -> str:
    """Never reuse the identity of the captured piece. One respawn per tick at most, so the turn keeps it unique."""
    return f"{original.identity}-respawn-{turn_count}"


def process_respawn_queue(
    state: GameState, rng: RandomSource, notify: Notifier = no_op
) -> GameState:
    """
    Try to bring back the head of the queue.
    ---

    No safe square? The entry stays at the front of the queue and gets retried at the next respawn tick.
    Entries are never dropped.
    """
    if not state.respawn_queue:
        return state

    entry, remaining_queue = state.respawn_queue[0], state.respawn_queue[1:]
    square = choose(rng, safe_spawn_squares(state))
    if square is None:
        logger.info(
            "No safe square to respawn a %s piece, retrying next time", entry.owner
        )
        emit(notify, GameEvent.RESPAWN_DEFERRED)
        return state

    piece_type = weighted_choice(rng, state.config.respawn_weights)
    respawned = Piece(
        type=piece_type,
        color=entry.owner,
        identity=respawned_identity(entry.piece, state.turn_count),
    )

    # the piece is no longer owed: remove it from the captured pieces
    captured_pieces = list(state.captured_pieces)
    for index, piece in enumerate(captured_pieces):
        if piece.identity == entry.piece.identity:
            del captured_pieces[index]
            break

    emit(notify, GameEvent.PIECE_RESPAWNED)
    return state.evolve(
        board=state.board.place_piece(respawned, square),
        captured_pieces=tuple(captured_pieces),
        respawn_queue=remaining_queue,
    )


def is_respawn_turn(state: GameState) -> bool:
    return state.turn_count > 0 and state.turn_count % state.config.respawn_interval == 0


def advance_respawn(
    state: GameState, rng: RandomSource, notify: Notifier = no_op
) -> GameState:
    if not is_respawn_turn(state):
        return state
    return process_respawn_queue(state, rng, notify)


def turns_until_next_respawn(state: GameState) -> int:
    interval = state.config.respawn_interval
    return interval - state.turn_count % interval

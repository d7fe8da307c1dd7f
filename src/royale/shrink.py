"""
Shrinking board
----

Every shrink cycle the next level of squares gets a warning countdown. When the countdown runs out,
the squares are removed from play for the rest of the game.

* Level 0: the four corners and the two edge squares next to each corner
* Level 1: the rest of the outer ring
* Level 2: the second ring

After the last level the board stops shrinking, leaving the centre 4x4 in play.

Cycle (with the default 12 turn cycle and a lead of 5 turns):
turn 1 -> level 0 squares get a 7 turn countdown -> they vanish on turn 8,
turn 13 -> level 1 (vanish on turn 20), turn 25 -> level 2 (vanish on turn 32).
"""

import logging
from dataclasses import replace
from typing import AbstractSet, Optional

from src.core.shared_types import PieceType
from src.royale.board import Board
from src.royale.events import GameEvent, Notifier, emit, no_op
from src.royale.position import BOARD_SIZE, Position
from src.royale.state import GameState, ShrinkBlock

logger = logging.getLogger(__name__)


def _positions(*coordinates: tuple[int, int]) -> tuple[Position, ...]:
    return tuple(Position(row, col) for row, col in coordinates)


SHRINK_LEVELS: tuple[tuple[Position, ...], ...] = (
    # corners first, then their neighbours along the edges
    _positions(
        (0, 0), (0, 7), (7, 0), (7, 7),
        (0, 1), (1, 0), (0, 6), (1, 7),
        (6, 0), (7, 1), (7, 6), (6, 7),
    ),
    _positions(
        (0, 2), (0, 3), (0, 4), (0, 5),
        (2, 0), (3, 0), (4, 0), (5, 0),
        (7, 2), (7, 3), (7, 4), (7, 5),
        (2, 7), (3, 7), (4, 7), (5, 7),
    ),
    _positions(
        (1, 1), (1, 2), (1, 3), (1, 4), (1, 5), (1, 6),
        (2, 1), (3, 1), (4, 1), (5, 1),
        (6, 1), (6, 2), (6, 3), (6, 4), (6, 5), (6, 6),
        (2, 6), (3, 6), (4, 6), (5, 6),
    ),
)  # fmt: skip

# Where a king caught on a vanishing square looks first: straight neighbours, then diagonal ones
ESCAPE_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, 0),
    (1, 0),
    (0, -1),
    (0, 1),
    (-1, -1),
    (-1, 1),
    (1, -1),
    (1, 1),
)


def generate_shrink_blocks(level: int, countdown: int) -> tuple[ShrinkBlock, ...]:
    """Warning blocks for all squares of a shrink level. Nothing left to shrink beyond the last level."""
    if not 0 <= level < len(SHRINK_LEVELS):
        return ()
    return tuple(
        ShrinkBlock(position=square, turns_until_shrink=countdown, is_warning=True)
        for square in SHRINK_LEVELS[level]
    )


def _is_safe(board: Board, square: Position, shrunk: AbstractSet[str]) -> bool:
    return (
        square.is_within_bounds()
        and square.key not in shrunk
        and board.is_empty(square)
    )


def find_nearest_safe_square(
    board: Board, origin: Position, shrunk: AbstractSet[str]
) -> Optional[Position]:
    """
    Closest empty square still in play
    ---

    1. the 8 neighbours (in the order of ESCAPE_DIRECTIONS)
    2. the square rings of radius 2, 3, ... around the origin, scanned row by row
    """
    for d_row, d_col in ESCAPE_DIRECTIONS:
        square = origin.offset(d_row, d_col)
        if _is_safe(board, square, shrunk):
            return square

    for radius in range(2, BOARD_SIZE):
        for d_row in range(-radius, radius + 1):
            for d_col in range(-radius, radius + 1):
                if max(abs(d_row), abs(d_col)) != radius:
                    continue
                square = origin.offset(d_row, d_col)
                if _is_safe(board, square, shrunk):
                    return square
    return None


def apply_due_shrink_blocks(state: GameState, notify: Notifier = no_op) -> GameState:
    """
    Remove every square whose countdown ran out.
    ----

    * A king on such a square is moved to the nearest safe square. If there is none, the king stays
      where it is and gets flagged as an emergency (it is never removed).
    * Any other piece is eliminated: it is gone for good and does not count as captured.
    * Power-ups and traps on the square disappear with it.
    """
    due_blocks = [block for block in state.shrink_blocks if block.turns_until_shrink <= 0]
    if not due_blocks:
        return state

    # all squares vanish at once, so a king never escapes onto a square that disappears in the same tick
    shrunk = set(state.shrunk_squares) | {block.position.key for block in due_blocks}
    board = state.board
    for block in sorted(due_blocks, key=lambda block: block.position):
        square = block.position
        piece = board.piece(square)
        if piece is None:
            continue

        if piece.type != PieceType.KING:
            board = board.remove_piece(square)
            emit(notify, GameEvent.PIECE_ELIMINATED)
            continue

        safe_square = find_nearest_safe_square(board, square, shrunk)
        if safe_square is None:
            logger.warning(
                "No safe square left for the %s king on %s, keeping it in place",
                piece.color,
                square.to_algebraic(),
            )
            board = board.place_piece(replace(piece, emergency=True), square)
            emit(notify, GameEvent.KING_EMERGENCY)
        else:
            board = board.remove_piece(square).place_piece(
                replace(piece, emergency=False), safe_square
            )
            emit(notify, GameEvent.KING_TELEPORTED)

    emit(notify, GameEvent.BOARD_SHRUNK)
    return state.evolve(
        board=board,
        shrunk_squares=frozenset(shrunk),
        shrink_blocks=tuple(
            block for block in state.shrink_blocks if block.turns_until_shrink > 0
        ),
        power_ups=tuple(
            power_up for power_up in state.power_ups if power_up.position.key not in shrunk
        ),
        trap_squares={
            key: owner for key, owner in state.trap_squares.items() if key not in shrunk
        },
    )


def advance_shrink_schedule(state: GameState, notify: Notifier = no_op) -> GameState:
    """
    One tick of the shrink cycle: Idle -> Warning(countdown) -> Applying -> Idle
    ---

    Every tick all countdowns go down by one. At cycle position 1 the next level is scheduled on top of
    whatever is still counting down. Blocks that reach zero are applied.
    """
    config = state.config
    cycle_position = state.turn_count % config.shrink_cycle
    level = state.turn_count // config.shrink_cycle

    blocks = tuple(
        replace(block, turns_until_shrink=block.turns_until_shrink - 1)
        for block in state.shrink_blocks
    )
    if any(block.turns_until_shrink == 1 for block in blocks):
        emit(notify, GameEvent.SHRINK_IMMINENT)

    if cycle_position == 1 and level < config.max_shrink_level:
        scheduled = {block.position for block in blocks}
        new_blocks = tuple(
            block
            for block in generate_shrink_blocks(level, config.shrink_countdown)
            if not state.is_shrunk(block.position) and block.position not in scheduled
        )
        if new_blocks:
            emit(notify, GameEvent.SHRINK_WARNING)
        blocks = blocks + new_blocks

    return apply_due_shrink_blocks(state.evolve(shrink_blocks=blocks), notify)


def turns_until_next_shrink(state: GameState) -> Optional[int]:
    """How many ticks until squares vanish next. None once the board has stopped shrinking."""
    if state.shrink_blocks:
        return max(0, min(block.turns_until_shrink for block in state.shrink_blocks))

    config = state.config
    next_schedule = (state.turn_count // config.shrink_cycle) * config.shrink_cycle + 1
    if next_schedule <= state.turn_count:
        next_schedule += config.shrink_cycle
    level = next_schedule // config.shrink_cycle
    if level >= min(config.max_shrink_level, len(SHRINK_LEVELS)):
        return None
    return next_schedule - state.turn_count + config.shrink_countdown

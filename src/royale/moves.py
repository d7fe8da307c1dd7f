"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define move sets for each piece type.

Shrunk squares have been removed from play: nothing can land on them. They are always empty though
(shrinking clears them), so they never block a sliding piece's line of sight.

Legality (not leaving your own king in check) is checked later in rules.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, Callable, Optional, Protocol

from src.core.shared_types import Color, PieceType
from src.royale.pieces import Piece
from src.royale.position import Position

if TYPE_CHECKING:
    from src.royale.state import PowerUp


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Position) -> Optional[Piece]: ...


Vector = tuple[int, int]
ShrunkSquares = AbstractSet[str]


@dataclass(frozen=True)
class Move:
    """
    A move is a value: building one never touches the board.

    `piece` is the moving piece as it stood before the move, `captured` whatever stood on the target square.
    `used_power_up` is set when a power-up (teleport) made the move possible.
    """

    from_square: Position
    to_square: Position
    piece: Piece
    captured: Optional[Piece] = None
    used_power_up: Optional[PowerUp] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def to_algebraic(self) -> str:
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


def build_move(board: Board, from_square: Position, to_square: Position) -> Move:
    """Snapshot the moving piece and whatever stands on the target square"""
    piece = board.piece(from_square)
    # for the type checker: movement rules only start from occupied squares
    assert piece is not None
    return Move(from_square, to_square, piece, captured=board.piece(to_square))


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Position, board: Board, directions: list[Vector], shrunk: ShrunkSquares
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    moving_piece = board.piece(square)
    assert moving_piece is not None

    moves: list[Move] = []
    for d_row, d_col in directions:
        target_square = square
        while True:
            target_square = target_square.offset(d_row, d_col)
            if not target_square.is_within_bounds():
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                # only the first occupied square found matters: if it is the opponent's, it can be captured.
                if (
                    piece_found.color != moving_piece.color
                    and target_square.key not in shrunk
                ):
                    moves.append(build_move(board, square, target_square))
                break

            if target_square.key not in shrunk:
                moves.append(build_move(board, square, target_square))
    return moves


def single_step_move(
    square: Position, board: Board, deltas: list[Vector], shrunk: ShrunkSquares
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just make a single step along a direction"""
    moving_piece = board.piece(square)
    assert moving_piece is not None

    moves: list[Move] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds() or target_square.key in shrunk:
            continue

        piece_found = board.piece(target_square)
        if piece_found is None or piece_found.color != moving_piece.color:
            moves.append(build_move(board, square, target_square))

    return moves


def pawn_direction(color: Color) -> int:
    """White pawns move up the board (towards row 0), Black pawns move down"""
    return -1 if color == Color.WHITE else 1


def pawn_starting_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def candidate_pawn_moves(
    square: Position, board: Board, shrunk: ShrunkSquares
) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two if it never moved and still stands on its starting row (both squares must be empty)
    - takes diagonally

    NOTE: No en passant and no promotion in battle royale. A pawn reaching the last row just stays a pawn.
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = pawn_direction(pawn.color)

    moves: list[Move] = []
    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and board.piece(one_step) is None:
        if one_step.key not in shrunk:
            moves.append(build_move(board, square, one_step))

        two_steps = square.offset(2 * direction, 0)
        may_double_step = (
            not pawn.has_moved and square.row == pawn_starting_row(pawn.color)
        )
        if (
            may_double_step
            and two_steps.is_within_bounds()
            and board.piece(two_steps) is None
            and two_steps.key not in shrunk
        ):
            moves.append(build_move(board, square, two_steps))

    # pawns take diagonally:
    for d_col in (-1, 1):
        target_square = square.offset(direction, d_col)
        if not target_square.is_within_bounds() or target_square.key in shrunk:
            continue
        piece_found = board.piece(target_square)
        if piece_found is not None and piece_found.color != pawn.color:
            moves.append(build_move(board, square, target_square))
    return moves


KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def candidate_knight_moves(
    square: Position, board: Board, shrunk: ShrunkSquares
) -> list[Move]:
    """Knights always move such that |delta_row| + |delta_col| = 3 (and jump over anything in between)"""
    return single_step_move(square, board, KNIGHT_DELTAS, shrunk)


def candidate_bishop_moves(
    square: Position, board: Board, shrunk: ShrunkSquares
) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS, shrunk)


def candidate_rook_moves(
    square: Position, board: Board, shrunk: ShrunkSquares
) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS, shrunk)


def candidate_queen_moves(
    square: Position, board: Board, shrunk: ShrunkSquares
) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    diagonal_moves = candidate_bishop_moves(square, board, shrunk)
    horizontal_and_vertical_moves = candidate_rook_moves(square, board, shrunk)
    return diagonal_moves + horizontal_and_vertical_moves


def candidate_king_moves(
    square: Position, board: Board, shrunk: ShrunkSquares
) -> list[Move]:
    """The king can move by a single square at the time. No castling."""
    return single_step_move(square, board, KING_DELTAS, shrunk)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board, ShrunkSquares], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Position,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_
    """
    for d_row, d_col in directions:
        target_square = square
        while True:
            target_square = target_square.offset(d_row, d_col)
            if not target_square.is_within_bounds():
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                # only the first occupied square matters
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
    return False


def single_step_attack(
    square: Position,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """Attack equivalent of `single_step_move()`"""
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        piece_found = board.piece(target_square)
        if (
            piece_found is not None
            and piece_found.color == by_color
            and piece_found.type == by_piece_type
        ):
            return True

    return False


def is_attacked_by_pawn(square: Position, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. To check IF a white pawn (moving UP the board, towards row 0) could take on
    the specified square, we look one row DOWN the board (row + 1). Hence, the vectors are the opposite of the
    ones used in `candidate_pawn_moves()`
    """
    backwards = -pawn_direction(by_color)
    inverse_pawn_take_deltas: list[Vector] = [(backwards, 1), (backwards, -1)]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(square: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_bishop(square: Position, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, (PieceType.BISHOP,), board, DIAGONALS)


def is_attacked_by_rook(square: Position, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, (PieceType.ROOK,), board, STRAIGHTS)


def is_attacked_by_queen(square: Position, by_color: Color, board: Board) -> bool:
    return raycasting_attack(square, by_color, (PieceType.QUEEN,), board, KING_DELTAS)


def is_attacked_by_king(square: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Color, Board], bool]
ATTACK_RULES: dict[PieceType, IsAttackedFn] = {
    PieceType.PAWN: is_attacked_by_pawn,
    PieceType.KNIGHT: is_attacked_by_knight,
    PieceType.BISHOP: is_attacked_by_bishop,
    PieceType.ROOK: is_attacked_by_rook,
    PieceType.QUEEN: is_attacked_by_queen,
    PieceType.KING: is_attacked_by_king,
}

"""
Move validation and terminal-state detection.

Pure functions over a board + the set of shrunk squares. Nothing in here knows about turns, power-ups or
any of the other battle royale mechanics: those live in the game reducer.
"""

from src.core.shared_types import Color
from src.royale.board import Board
from src.royale.moves import MOVEMENT_RULES, Move, ShrunkSquares
from src.royale.position import Position


def is_legal_move(
    board: Board, from_square: Position, to_square: Position, shrunk: ShrunkSquares
) -> bool:
    """
    Can the piece on `from_square` move to `to_square` following its movement rules?
    ---

    This is the geometric (pseudo-legal) test: it does not look at the safety of the mover's king.
    """
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return False
    if to_square.key in shrunk:
        return False

    piece = board.piece(from_square)
    if piece is None:
        return False

    target = board.piece(to_square)
    if target is not None and target.color == piece.color:
        return False

    candidate_moves = MOVEMENT_RULES[piece.type](from_square, board, shrunk)
    return any(move.to_square == to_square for move in candidate_moves)


def all_pseudo_legal_moves(
    board: Board, color: Color, shrunk: ShrunkSquares
) -> list[Move]:
    return board.generate_candidate_moves(color, shrunk)


def leaves_king_in_check(board: Board, move: Move, shrunk: ShrunkSquares) -> bool:
    """Return True if the move puts (or leaves) the mover's own king in check

    plan:
    1. make the candidate move on a new board
    2. determine if king is in check on the new board
    """
    board_after_move = board.move_piece(move)
    return board_after_move.is_check(move.piece.color, shrunk)


def all_legal_moves(board: Board, color: Color, shrunk: ShrunkSquares) -> list[Move]:
    """Keep those moves that do not put (or leave) you in check"""
    return [
        move
        for move in all_pseudo_legal_moves(board, color, shrunk)
        if not leaves_king_in_check(board, move, shrunk)
    ]


def has_legal_move(board: Board, color: Color, shrunk: ShrunkSquares) -> bool:
    return any(
        not leaves_king_in_check(board, move, shrunk)
        for move in all_pseudo_legal_moves(board, color, shrunk)
    )


# --- CHECKS FOR ENDING THE GAME ---
def is_in_check(board: Board, color: Color, shrunk: ShrunkSquares) -> bool:
    return board.is_check(color, shrunk)


def is_checkmate(board: Board, color: Color, shrunk: ShrunkSquares) -> bool:
    return is_in_check(board, color, shrunk) and not has_legal_move(board, color, shrunk)


def is_stalemate(board: Board, color: Color, shrunk: ShrunkSquares) -> bool:
    return not is_in_check(board, color, shrunk) and not has_legal_move(
        board, color, shrunk
    )


def delivers_checkmate(board: Board, move: Move, shrunk: ShrunkSquares) -> bool:
    """Does playing this move checkmate the opponent?"""
    board_after_move = board.move_piece(move)
    return is_checkmate(board_after_move, move.piece.color.opponent, shrunk)

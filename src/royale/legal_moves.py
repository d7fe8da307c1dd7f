"""
Legal moves in a battle royale position: the chess rules of rules.py plus the power-up effects.

* a shielded piece cannot be captured
* a player with an armed teleport may additionally teleport one piece
"""

from typing import Optional

from src.core.shared_types import Color
from src.royale.moves import Move
from src.royale.powerups import teleport_moves
from src.royale.rules import all_legal_moves
from src.royale.state import GameState


def legal_moves(state: GameState, color: Color) -> list[Move]:
    moves = [
        move
        for move in all_legal_moves(state.board, color, state.shrunk_squares)
        if move.captured is None or not state.is_shielded(move.captured)
    ]
    return moves + teleport_moves(state, color)


def find_legal_move(state: GameState, move: Move) -> Optional[Move]:
    """
    Look the requested move up among the legal moves of the player to move.
    ---

    Moves are matched on their squares (and whether they are a teleport). The engine's own version of the
    move is returned, so a stale `captured` snapshot from the caller can never sneak in.
    Returns None if the move is not legal or `move.piece` is not the piece standing on the starting square.
    """
    piece = state.board.piece(move.from_square)
    if piece is None or piece.identity != move.piece.identity:
        return None

    wants_teleport = move.used_power_up is not None
    return next(
        (
            candidate
            for candidate in legal_moves(state, state.current_player)
            if candidate.from_square == move.from_square
            and candidate.to_square == move.to_square
            and (candidate.used_power_up is not None) == wants_teleport
        ),
        None,
    )

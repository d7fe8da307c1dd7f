"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class GamePhase(StrEnum):
    PLAYING = "playing"
    GAME_OVER = "game over"


class Outcome(StrEnum):
    """Who won. Only set once the game phase is GAME_OVER"""

    WHITE = "white"
    BLACK = "black"
    DRAW = "draw"


class PowerUpType(StrEnum):
    TELEPORT = "teleport"
    SHIELD = "shield"
    EXTRA_MOVE = "extraMove"
    TRAP = "trap"


class TransformationKind(StrEnum):
    # NOTE: fusion is a legacy kind. Boards may still carry it, but the engine only ever produces veterans.
    FUSION = "fusion"
    VETERAN = "veteran"

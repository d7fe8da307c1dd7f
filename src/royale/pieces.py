"""Defines the chess pieces"""

from dataclasses import dataclass, replace
from typing import Optional, Self

from src.core.shared_types import Color, PieceType, TransformationKind

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


# NOTE: The king gets a (large) finite value, the computer player has to care about losing it.
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}


@dataclass(frozen=True)
class Piece:
    """
    A physical piece.
    ----

    The identity stays the same while the piece moves around. Respawned pieces get a fresh identity.
    Pieces are immutable: every change produces a new Piece.
    """

    type: PieceType
    color: Color
    identity: str
    has_moved: bool = False
    turns_without_moving: int = 0
    transformed: bool = False
    transformation_kind: Optional[TransformationKind] = None
    emergency: bool = False

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.type]

    @classmethod
    def from_fen(cls, character: str, identity: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color, identity)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def after_move(self) -> Self:
        """The same piece once it has moved: it counts as moved and the idle counter starts over"""
        return replace(self, has_moved=True, turns_without_moving=0, emergency=False)

    def aged(self) -> Self:
        """One more turn standing still"""
        return replace(self, turns_without_moving=self.turns_without_moving + 1)

    def transformed_into(self, new_type: PieceType) -> Self:
        return replace(
            self,
            type=new_type,
            transformed=True,
            transformation_kind=TransformationKind.VETERAN,
            turns_without_moving=0,
        )

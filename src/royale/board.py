"""The Game board implements all rules that effect the `position` (the configuration of pieces on the board)"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional, Self

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceType
from src.royale.moves import (
    ATTACK_RULES,
    MOVEMENT_RULES,
    CandidateMovesFn,
    Move,
    ShrunkSquares,
)
from src.royale.pieces import FEN_TO_PIECE, PIECE_VALUES, Piece
from src.royale.position import ALL_POSITIONS, BOARD_SIZE, Position

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_FEN = "/".join(["8"] * BOARD_SIZE)


def default_identity(piece_char: str, square: Position) -> str:
    """Stable id of a piece that was on the board from the start: '<color>-<type>-<row>-<col>'"""
    color = Color.WHITE if piece_char.isupper() else Color.BLACK
    return f"{color}-{FEN_TO_PIECE[piece_char.lower()]}-{square.row}-{square.col}"


def is_valid_placement(placement: str) -> bool:
    """Only check the part of a FEN encoding for the board position."""
    rank_fens = placement.split("/")
    if len(rank_fens) != BOARD_SIZE:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                return False

        if file_count != BOARD_SIZE:
            return False
    return True


@dataclass(frozen=True, eq=False)
class Board:
    """
    8x8 grid of optional pieces.
    ---

    Only occupied squares are stored. The board is never changed in place:
    every update returns a new Board, so older snapshots stay valid (UI diffing, scratch evaluation of moves).
    Boards compare by their pieces. They are not hashable.
    """

    position: Mapping[Position, Piece] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only view on a private copy, nobody can mutate a board behind our back
        object.__setattr__(self, "position", MappingProxyType(dict(self.position)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return dict(self.position) == dict(other.position)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the board part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on row 0 (the 8th rank), starting with a rook on a8
        * black pawns cover row 1 entirely
        * rows 2 through 5 have 8 consecutive empty squares
        * white pawns on row 6 (capital letters), white pieces on row 7
        """
        if not is_valid_placement(fen_str):
            raise InvalidFENError(f"Cannot build a board from {fen_str!r}")

        position: dict[Position, Piece] = {}
        for row, fen_one_row in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    square = Position(row, col)
                    identity = default_identity(character, square)
                    position[square] = Piece.from_fen(character, identity)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(position)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def empty(cls) -> Self:
        return cls({})

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_SIZE))

    def _row_to_fen(self, row: int) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_SIZE):
            piece = self.piece(Position(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- QUERIES ---
    def piece(self, square: Position) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Position) -> bool:
        return square not in self.position

    def items(self) -> Iterator[tuple[Position, Piece]]:
        """Occupied squares in row-major order (keeps every scan over the board deterministic)"""
        for square in sorted(self.position):
            yield square, self.position[square]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Position]:
        return [
            square
            for square, piece in self.items()
            if piece.type == piece_type and piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Position]:
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    def locate_color(self, color: Color) -> list[Position]:
        return [square for square, piece in self.items() if piece.color == color]

    def locate_identity(self, identity: str) -> Optional[Position]:
        return next(
            (square for square, piece in self.items() if piece.identity == identity),
            None,
        )

    def kings(self) -> list[Position]:
        return [square for square, piece in self.items() if piece.type == PieceType.KING]

    def colors_present(self) -> list[Color]:
        return [color for color in Color if self.locate_color(color)]

    def empty_squares(self) -> list[Position]:
        return [square for square in ALL_POSITIONS if self.is_empty(square)]

    # --- UPDATES (all return a new board) ---
    def place_piece(self, piece: Piece, square: Position) -> Self:
        position = dict(self.position)
        position[square] = piece
        return type(self)(position)

    def remove_piece(self, square: Position) -> Self:
        position = dict(self.position)
        position.pop(square, None)
        return type(self)(position)

    def move_piece(self, move: Move) -> Self:
        """Update the position on the board. Whatever stood on the target square is gone."""
        position = dict(self.position)
        piece_that_moved = position.pop(move.from_square)
        position[move.to_square] = piece_that_moved
        return type(self)(position)

    def map_pieces(self, update: Callable[[Piece], Piece]) -> Self:
        """Apply `update(piece) -> Piece` to every piece on the board"""
        return type(self)({square: update(piece) for square, piece in self.items()})

    # --- MOVES AND ATTACKS ---
    def generate_candidate_moves(
        self, color: Color, shrunk: ShrunkSquares = frozenset()
    ) -> list[Move]:
        """
        Candidate (pseudo-legal) moves using raycasting. These will later be tested for legality
        (making sure they do not put yourself in check.)
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            piece = self.piece(starting_square)
            assert piece is not None
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
            candidate_moves.extend(movement_rule(starting_square, self, shrunk))
        return candidate_moves

    def is_square_attacked(
        self, square: Position, by_color: Color, shrunk: ShrunkSquares = frozenset()
    ) -> bool:
        """Could any piece of `by_color` move onto the square? Nothing can move onto a shrunk square."""
        if square.key in shrunk:
            return False
        return any(
            is_attacked(square, by_color, self) for is_attacked in ATTACK_RULES.values()
        )

    def is_check(self, color: Color, shrunk: ShrunkSquares = frozenset()) -> bool:
        """Is the king of `color` under attack? A side without a king is never in check."""
        king_square = self.locate_king(color)
        if king_square is None:
            return False
        return self.is_square_attacked(king_square, color.opponent, shrunk)

    # --- MATERIAL ---
    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {color: self._count_material_player(color) for color in Color}

    def _count_material_player(self, color: Color) -> int:
        return sum(
            PIECE_VALUES[piece.type]
            for _, piece in self.items()
            if piece.color == color
        )

    def evaluate(self, color: Color) -> int:
        """Material balance from the point of view of `color`"""
        material = self.count_material()
        return material[color] - material[color.opponent]

"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Battle royale is played on a regular 8x8 board. Shrinking removes squares from play, never from the grid.
BOARD_SIZE = 8


@dataclass(frozen=True, order=True)
class Position:
    """
    (row, col) on the grid.
    Row 0 is Black's back rank, row 7 is White's back rank. Col 0 is the a-file.
    """

    row: int
    col: int

    @property
    def key(self) -> str:
        """Canonical string used wherever positions are set/map keys (shrunk squares, traps)"""
        return f"{self.row}-{self.col}"

    @classmethod
    def from_key(cls, key: str) -> Position:
        row, col = key.split("-")
        return cls(int(row), int(col))

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a1' is the bottom left corner (7, 0), 'h8' the top right corner (0, 7)"""
        col = ord(sq[0]) - ord("a")
        row = BOARD_SIZE - int(sq[1])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{BOARD_SIZE - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_SIZE) and (0 <= self.col < BOARD_SIZE)

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)

    def chebyshev_distance(self, other: Position) -> int:
        return max(abs(self.row - other.row), abs(self.col - other.col))

    def manhattan_distance(self, other: Position) -> int:
        return abs(self.row - other.row) + abs(self.col - other.col)

    def is_adjacent_or_same(self, other: Position) -> bool:
        return self.chebyshev_distance(other) <= 1

    def edge_distance(self) -> int:
        """Number of squares between this square and the closest edge of the board"""
        return min(self.row, BOARD_SIZE - 1 - self.row, self.col, BOARD_SIZE - 1 - self.col)


ALL_POSITIONS: tuple[Position, ...] = tuple(
    Position(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)
)

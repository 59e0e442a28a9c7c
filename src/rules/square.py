"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Squares are addressed by (row, col): row 0 is Black's back rank (the 8th rank) and row 7 is White's back rank (the 1st rank).
Columns 0..7 map to the files a..h.
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

# Chess board is always 8x8. (rows, cols)
BOARD_DIMENSIONS = (8, 8)
FILES = ascii_lowercase[: BOARD_DIMENSIONS[1]]


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' gets converted to (0, 0), 'h1' to (7, 7)"""
        col = ord(sq[0]) - ord("a")
        row = BOARD_DIMENSIONS[0] - int(sq[1:])
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{self.file}{self.rank}"

    @property
    def file(self) -> str:
        return FILES[self.col]

    @property
    def rank(self) -> int:
        return BOARD_DIMENSIONS[0] - self.row

    def offset(self, d_row: int, d_col: int) -> Square:
        """The square found by stepping along a vector. May fall off the board: check with `is_within_bounds()`"""
        return Square(self.row + d_row, self.col + d_col)

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )


def all_squares() -> list[Square]:
    """Every square of the board, reading order (a8 first, h1 last)"""
    return [
        Square(row, col)
        for row in range(BOARD_DIMENSIONS[0])
        for col in range(BOARD_DIMENSIONS[1])
    ]

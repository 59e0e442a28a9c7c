"""The Game board: a grid of 64 squares, each either empty or holding a single piece. Knows nothing about legality."""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.rules.pieces import Color, Piece, PieceKind
from src.rules.square import BOARD_DIMENSIONS, Square, all_squares

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    position: dict[Square, Optional[Piece]]

    @classmethod
    def empty(cls) -> Self:
        return cls({square: None for square in all_squares()})

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_PLACEMENT)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """
        Piece placement field of a FEN string, 8th rank first.
        Letters are pieces (capitals for white), digits count empty squares.
        """
        board = cls.empty()
        for row, rank in enumerate(fen_str.split("/")):
            col = 0
            for character in rank:
                if character.isdecimal():
                    col += int(character)
                    continue
                board.set(Square(row, col), Piece.from_fen(character))
                col += 1
        return board

    def to_fen(self) -> str:
        return "/".join(self._rank_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _rank_to_fen(self, row: int) -> str:
        letters = [
            piece.to_fen() if piece else "1"
            for piece in (self.get(Square(row, col)) for col in range(BOARD_DIMENSIONS[1]))
        ]
        # merge runs of empty squares: "1","1","1" -> "3"
        encoded = ""
        for letter in letters:
            if letter == "1" and encoded[-1:].isdecimal():
                encoded = encoded[:-1] + str(int(encoded[-1]) + 1)
            else:
                encoded += letter
        return encoded

    def get(self, square: Square) -> Optional[Piece]:
        return self.position[square]

    def set(self, square: Square, piece: Optional[Piece]) -> None:
        self.position[square] = piece

    def is_empty(self, square: Square) -> bool:
        return self.position[square] is None

    def clone(self) -> Self:
        """Independent value copy (pieces included), used for trying out a move without touching this board."""
        return deepcopy(self)

    def find(self, kind: PieceKind, color: Color) -> Optional[Square]:
        """First square holding the given piece. Used to locate the kings."""
        for square, piece in self.position.items():
            if piece is not None and piece.kind == kind and piece.color == color:
                return square
        return None

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.position.items()
            if piece is not None and piece.color == color
        ]

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """Relocate the piece object. Returns whatever stood on the target square before."""
        piece_that_moved = self.get(from_square)
        replaced = self.get(to_square)
        self.set(from_square, None)
        self.set(to_square, piece_that_moved)
        return replaced

    def remove_piece(self, square: Square) -> Optional[Piece]:
        removed = self.get(square)
        self.set(square, None)
        return removed

    def to_grid(self) -> list[list[Optional[str]]]:
        """Rows of FEN piece letters (None for empty squares), row 0 being the 8th rank. Read-only snapshot for display."""
        return [
            [
                piece.to_fen() if (piece := self.get(Square(row, col))) else None
                for col in range(BOARD_DIMENSIONS[1])
            ]
            for row in range(BOARD_DIMENSIONS[0])
        ]

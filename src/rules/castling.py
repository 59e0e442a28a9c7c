"""Castling: which squares king and rook use, and which rights are still open. Shared by move generation, execution and FEN."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Self

from src.rules.pieces import Color
from src.rules.square import Square


class CastlingDirection(Enum):
    """One member per color and side. The value is the FEN letter."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def is_king_side(self) -> bool:
        return self.value.lower() == "k"


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)


@dataclass(frozen=True)
class CastlingSquares:
    """Home and destination squares of king and rook for one castling direction."""

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_names(cls, *names: str) -> Self:
        """ex. from_names("e1", "g1", "h1", "f1"): king from, king to, rook from, rook to"""
        return cls(*(Square.from_algebraic(name) for name in names))

    def squares_between(self) -> list[Square]:
        """Squares strictly between king and rook. All of them must be empty before castling."""
        return _squares_between_on_row(self.king_from, self.rook_from)

    def king_path(self) -> list[Square]:
        """The king's current square, every square it crosses and its destination. None of these may be under attack."""
        return [
            self.king_from,
            *_squares_between_on_row(self.king_from, self.king_to),
            self.king_to,
        ]


def _squares_between_on_row(from_square: Square, to_square: Square) -> list[Square]:
    """Exclusive of both ends"""
    if from_square.row != to_square.row:
        raise ValueError(f"{from_square} and {to_square} are not on the same row")
    step = 1 if to_square.col > from_square.col else -1
    return [
        Square(from_square.row, col)
        for col in range(from_square.col + step, to_square.col, step)
    ]


CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    direction: CastlingSquares.from_names(*names.split())
    for direction, names in (
        (CastlingDirection.WHITE_KING_SIDE, "e1 g1 h1 f1"),
        (CastlingDirection.WHITE_QUEEN_SIDE, "e1 c1 a1 d1"),
        (CastlingDirection.BLACK_KING_SIDE, "e8 g8 h8 f8"),
        (CastlingDirection.BLACK_QUEEN_SIDE, "e8 c8 a8 d8"),
    )
}


def castling_directions(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]


def castling_direction_for_king_move(
    from_square: Square, to_square: Square
) -> Optional[CastlingDirection]:
    """A king jumping two files from its home square is castling. Returns the matching direction (if any)."""
    for direction, squares in CASTLING_RULES.items():
        if squares.king_from == from_square and squares.king_to == to_square:
            return direction
    return None


def _all_rights_open() -> dict[CastlingDirection, bool]:
    return {direction: True for direction in CASTLING_ORDER}


@dataclass
class CastlingRights:
    """
    Per color, a king-side and a queen-side flag.
    ---
    Rights only ever get revoked: there is no way to grant one back during a game.
    """

    rights: dict[CastlingDirection, bool] = field(default_factory=_all_rights_open)

    @classmethod
    def from_fen(cls, castle_fen: str) -> Self:
        """ex. "Kq": white may still castle king side, black queen side"""
        return cls(
            {direction: (direction.value in castle_fen) for direction in CASTLING_ORDER}
        )

    def to_fen(self) -> str:
        """Open rights in KQkq order, "-" when none are left"""
        letters = [direction.value for direction in CASTLING_ORDER if self.rights[direction]]
        return "".join(letters) or "-"

    def has(self, direction: CastlingDirection) -> bool:
        return self.rights[direction]

    def revoke(self, direction: CastlingDirection) -> None:
        self.rights[direction] = False

    def revoke_all(self, color: Color) -> None:
        for direction in castling_directions(color):
            self.revoke(direction)

    def revoke_for_square(self, square: Square) -> None:
        """A rook leaving its home square, or anything getting captured there, ends castling on that side for good."""
        for direction, squares in CASTLING_RULES.items():
            if squares.rook_from == square:
                self.revoke(direction)

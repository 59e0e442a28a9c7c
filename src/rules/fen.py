"""
FEN (Forsyth-Edwards Notation) codec: one line of text holding everything needed to resume a game from a position.

    <piece placement> <active color> <castling rights> <en passant square> <half move clock> <full move number>

ex) the standard starting position:
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
"""

from dataclasses import dataclass
from typing import Callable, Optional, Self

from src.core.exceptions import InvalidFENError
from src.rules.castling import CASTLING_ORDER, CastlingRights
from src.rules.pieces import FEN_TO_PIECE, Color
from src.rules.square import BOARD_DIMENSIONS, FILES, Square

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
COLOR_CODES = {"w": Color.WHITE, "b": Color.BLACK}
# a pawn can only have skipped a square on the 3rd (white) or 6th (black) rank
EN_PASSANT_RANKS = ("3", "6")


# --- VALIDATION (one check per space separated field) ---
def is_valid_position(position: str) -> bool:
    """8 ranks of 8 squares each, known piece letters only, and exactly one king per color."""
    ranks = position.split("/")
    if len(ranks) != BOARD_DIMENSIONS[0]:
        return False

    if any(_rank_width(rank) != BOARD_DIMENSIONS[1] for rank in ranks):
        return False

    return position.count("K") == 1 and position.count("k") == 1


def _rank_width(rank: str) -> Optional[int]:
    """Number of squares a single rank describes. None if it holds anything but digits and piece letters."""
    width = 0
    for character in rank:
        if character.isdecimal():
            width += int(character)
        elif character.lower() in FEN_TO_PIECE:
            width += 1
        else:
            return None
    return width


def is_valid_color_code(color: str) -> bool:
    return color in COLOR_CODES


def is_valid_castling_rights(castling: str) -> bool:
    """'-' if nobody may castle. Otherwise a selection of 'KQkq', keeping that order and without repeats."""
    if castling == "-":
        return True

    order = "".join(direction.value for direction in CASTLING_ORDER)
    previous_index = -1
    for character in castling:
        index = order.find(character)
        if index <= previous_index:
            return False
        previous_index = index
    return bool(castling)


def is_valid_square(square: str) -> bool:
    """File letter followed by a rank number, ex. 'e4'"""
    if len(square) < 2:
        return False

    file_char, rank_str = square[0], square[1:]
    return (
        file_char in FILES
        and rank_str.isdecimal()
        and 1 <= int(rank_str) <= BOARD_DIMENSIONS[0]
    )


def is_valid_en_passant(en_passant: str) -> bool:
    if en_passant == "-":
        return True
    return is_valid_square(en_passant) and en_passant[1:] in EN_PASSANT_RANKS


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdecimal()


def is_valid_move_number(number: str) -> bool:
    """The full move number starts at 1"""
    return number.isdecimal() and int(number) > 0


FIELD_VALIDATORS: tuple[Callable[[str], bool], ...] = (
    is_valid_position,
    is_valid_color_code,
    is_valid_castling_rights,
    is_valid_en_passant,
    is_valid_move_counter,
    is_valid_move_number,
)


def is_valid_fen(fen: str) -> bool:
    """Six space separated fields, each one passing its own check."""
    fields = fen.split(" ")
    if len(fields) != len(FIELD_VALIDATORS):
        return False
    return all(check(value) for check, value in zip(FIELD_VALIDATORS, fields))


@dataclass
class FENState:
    """
    The six FEN fields, parsed.
    ----

    * position: piece placement, parsed further by `Board.from_fen()`
    * color_to_move: "w" or "b" in the string
    * castling_rights: capitals for white, lower case for black, "-" when none are left
    * en_passant_square: square a pawn skipped on the previous move, "-" when there is none
    * half_move_clock: moves since the last pawn move or capture
    * num_turns: starts at 1, goes up after every move of black
    """

    position: str
    color_to_move: Color
    castling_rights: CastlingRights
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        position, color, castling, en_passant, half_moves, turns = fen.split(" ")
        return cls(
            position=position,
            color_to_move=COLOR_CODES[color],
            castling_rights=CastlingRights.from_fen(castling),
            en_passant_square=(
                Square.from_algebraic(en_passant) if en_passant != "-" else None
            ),
            half_move_clock=int(half_moves),
            num_turns=int(turns),
        )

    def to_fen(self) -> str:
        color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant = (
            self.en_passant_square.to_algebraic() if self.en_passant_square else "-"
        )
        return " ".join(
            [
                self.position,
                color,
                self.castling_rights.to_fen(),
                en_passant,
                str(self.half_move_clock),
                str(self.num_turns),
            ]
        )

"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


# --- Boundary versions of Color and PieceKind (promotion choices only). The domain layer (src/rules/pieces.py) has its own enums.
# --- NOTE Color has the same name as in the domain layer: the imports show which version a module uses


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PromotionChoice(StrEnum):
    """The piece types a pawn may promote into"""

    QUEEN = "queen"
    ROOK = "rook"
    BISHOP = "bishop"
    KNIGHT = "knight"

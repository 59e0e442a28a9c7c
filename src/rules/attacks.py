"""
Attack oracle: is a square under attack by a given color?

Reuses the attacking rules defined next to the movement rules in moves.py.
Used for detecting check and for checking a king does not castle through (or into, or out of) an attack.
"""

from typing import Optional

from src.rules.board import Board
from src.rules.moves import ATTACK_RULES
from src.rules.pieces import Color, PieceKind
from src.rules.square import Square


def attacked_squares(square: Square, board: Board) -> list[Square]:
    """Squares attacked by the piece standing on the given square"""
    piece = board.get(square)
    if piece is None:
        return []
    return ATTACK_RULES[piece.kind](square, board)


def is_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """Scan every piece of `by_color` and check if any of them attacks the square."""
    return any(
        square in attacked_squares(attacker_square, board)
        for attacker_square in board.locate_color(by_color)
    )


def king_square(color: Color, board: Board) -> Optional[Square]:
    return board.find(PieceKind.KING, color)


def is_in_check(color: Color, board: Board) -> bool:
    """Your king is attacked by your opponent"""
    king = king_square(color, board)
    if king is None:
        return False
    return is_attacked(king, color.opponent, board)

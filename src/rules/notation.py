"""
Short algebraic notation for the move list.

Only generating notation is supported. Check (+) and checkmate (#) marks depend on the position after the move,
so the caller appends them using `status_suffix()`.
"""

from src.core.shared_types import Status
from src.rules.legality import MoveEffects
from src.rules.pieces import PIECE_TO_FEN, PieceKind
from src.rules.square import Square

KING_SIDE_CASTLE = "O-O"
QUEEN_SIDE_CASTLE = "O-O-O"


def piece_letter(kind: PieceKind) -> str:
    """Pawns have no letter, all other pieces use their (capital) FEN letter."""
    return "" if kind == PieceKind.PAWN else PIECE_TO_FEN[kind].upper()


def move_notation(from_square: Square, to_square: Square, effects: MoveEffects) -> str:
    """
    ex)
    * "e4": pawn push
    * "Nf3": knight move
    * "Bxe5": bishop captures on e5
    * "exd6": pawn on the e-file captures on d6 (en passant looks the same)
    * "O-O" / "O-O-O": castling king side / queen side
    """
    if effects.castling_direction is not None:
        return (
            KING_SIDE_CASTLE
            if effects.castling_direction.is_king_side
            else QUEEN_SIDE_CASTLE
        )

    notation = piece_letter(effects.moved_piece.kind)
    if effects.is_capture:
        if effects.moved_piece.kind == PieceKind.PAWN:
            notation += from_square.file
        notation += "x"
    return notation + to_square.to_algebraic()


def promotion_suffix(kind: PieceKind) -> str:
    return f"={piece_letter(kind)}"


def status_suffix(status: Status, in_check: bool) -> str:
    if status == Status.CHECKMATE:
        return "#"
    if in_check:
        return "+"
    return ""

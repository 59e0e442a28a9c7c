"""
Pseudo-legal move generation for a single square.

Combines the per-piece movement rules (see moves.py) with the two rules that depend on more than the piece placement:
* en passant (depends on the previous move)
* castling (depends on the castling rights and on which squares the opponent attacks)
"""

from typing import Optional

from src.rules.attacks import is_attacked
from src.rules.board import Board
from src.rules.castling import CASTLING_RULES, CastlingRights, castling_directions
from src.rules.moves import MOVEMENT_RULES, en_passant_captures
from src.rules.pieces import Piece, PieceKind
from src.rules.square import Square


def pseudo_legal_moves(
    square: Square,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> set[Square]:
    """Target squares the piece on `square` may move to, before checking whether that leaves its own king in check."""
    piece = board.get(square)
    if piece is None:
        return set()

    targets = set(MOVEMENT_RULES[piece.kind](square, board))
    if piece.kind == PieceKind.PAWN:
        targets.update(en_passant_captures(square, board, en_passant_target))
    if piece.kind == PieceKind.KING:
        targets.update(castling_targets(square, board, castling_rights))
    return targets


def castling_targets(
    square: Square, board: Board, castling_rights: CastlingRights
) -> list[Square]:
    """
    Squares the king may jump to by castling
    ---

    **you are allowed to castle if**

    * Castling rights are not yet revoked (so king and rook have never moved).
    * The king and the rook still stand on their starting squares.
    * All squares in between the king and the rook are empty.
    * The king is not in check, and does not pass through or land on an attacked square.
      (The rook's square, and on the queen side the square next to it, may be attacked.)
    """
    king = board.get(square)
    assert king is not None
    opponent = king.color.opponent

    targets: list[Square] = []
    for direction in castling_directions(king.color):
        squares = CASTLING_RULES[direction]
        if not castling_rights.has(direction):
            continue

        if square != squares.king_from:
            continue

        if board.get(squares.rook_from) != Piece(PieceKind.ROOK, king.color):
            continue

        if not all(board.is_empty(between) for between in squares.squares_between()):
            continue

        if any(is_attacked(path, opponent, board) for path in squares.king_path()):
            continue

        targets.append(squares.king_to)
    return targets

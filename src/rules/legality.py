"""
Legality filter: a pseudo-legal move is only legal if it does not put (or leave) your own king in check.

Every candidate gets tried out on a copy of the board. The copy is changed by `execute_move()`, the very same function
the Game uses to change the real board, so en passant captures and castling rook moves are simulated exactly as they will be played.
"""

from dataclasses import dataclass
from typing import Optional

from src.rules.attacks import is_in_check
from src.rules.board import Board
from src.rules.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    castling_direction_for_king_move,
)
from src.rules.generator import pseudo_legal_moves
from src.rules.moves import en_passant_victim_square, is_pawn_push_to_promotion_square
from src.rules.pieces import Color, Piece, PieceKind
from src.rules.square import Square


@dataclass(frozen=True)
class MoveEffects:
    """What happened on the board when a move got executed. Needed for notation, castling rights and en passant bookkeeping."""

    moved_piece: Piece
    captured_piece: Optional[Piece]
    captured_square: Optional[Square]
    castling_direction: Optional[CastlingDirection]
    is_en_passant: bool
    is_double_advance: bool
    reaches_promotion_square: bool

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None


def execute_move(board: Board, from_square: Square, to_square: Square) -> MoveEffects:
    """
    Change the board for the move from `from_square` to `to_square`
    ---

    1. En passant: a pawn moving diagonally onto an empty square removes the pawn it passes
    2. Castling: a king jumping two files from its home square also relocates the rook
    3. Move the piece (the object itself) and clear the square it left

    NOTE: Does not check the move is legal, and does not promote (that needs a choice from the player).
    """
    piece = board.get(from_square)
    assert piece is not None, f"No piece to move on {from_square.to_algebraic()}"

    captured_piece = board.get(to_square)
    captured_square = to_square if captured_piece is not None else None

    is_en_passant = (
        piece.kind == PieceKind.PAWN
        and from_square.col != to_square.col
        and captured_piece is None
    )
    if is_en_passant:
        captured_square = en_passant_victim_square(from_square, to_square)
        captured_piece = board.remove_piece(captured_square)

    castling_direction = (
        castling_direction_for_king_move(from_square, to_square)
        if piece.kind == PieceKind.KING
        else None
    )
    if castling_direction is not None:
        squares = CASTLING_RULES[castling_direction]
        board.move_piece(squares.rook_from, squares.rook_to)

    board.move_piece(from_square, to_square)

    return MoveEffects(
        moved_piece=piece,
        captured_piece=captured_piece,
        captured_square=captured_square,
        castling_direction=castling_direction,
        is_en_passant=is_en_passant,
        is_double_advance=(
            piece.kind == PieceKind.PAWN and abs(to_square.row - from_square.row) == 2
        ),
        reaches_promotion_square=is_pawn_push_to_promotion_square(piece, to_square),
    )


def is_putting_yourself_in_check(
    board: Board, from_square: Square, to_square: Square
) -> bool:
    """Return True if the move puts you in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    scratch_board = board.clone()
    effects = execute_move(scratch_board, from_square, to_square)
    return is_in_check(effects.moved_piece.color, scratch_board)


def legal_moves(
    square: Square,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> set[Square]:
    """Pseudo-legal targets of the piece on `square`, minus those that would leave its own king in check."""
    return {
        target
        for target in pseudo_legal_moves(square, board, castling_rights, en_passant_target)
        if not is_putting_yourself_in_check(board, square, target)
    }


def all_legal_moves(
    color: Color,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> dict[Square, set[Square]]:
    """Legal targets for every piece of the given color that can move at all"""
    moves_by_square: dict[Square, set[Square]] = {}
    for square in board.locate_color(color):
        targets = legal_moves(square, board, castling_rights, en_passant_target)
        if targets:
            moves_by_square[square] = targets
    return moves_by_square


def has_legal_move(
    color: Color,
    board: Board,
    castling_rights: CastlingRights,
    en_passant_target: Optional[Square],
) -> bool:
    return any(
        legal_moves(square, board, castling_rights, en_passant_target)
        for square in board.locate_color(color)
    )

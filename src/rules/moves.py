"""
How each piece kind moves and which squares it attacks, ignoring checks.

Key idea: Use strategy pattern to define move sets for each piece type.
The movement rules and the attacking rules live next to each other: a change to how a piece attacks must be reflected in how it moves (and vice versa).


Legality (not leaving your own king in check) is checked later by the legality filter.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.rules.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Color, Piece, PieceKind
from src.rules.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def get(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


# (d_row, d_col)
Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made. Carries no piece: the mover is read from the board when the move is applied."""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceKind] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        Coordinate encoding of a move

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        promote_to = FEN_TO_PIECE[uci[4]] if len(uci) == 5 else None
        return cls(from_sq, to_sq, promote_to)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = PIECE_TO_FEN[self.promote_to] if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"


def forward(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def pawn_starting_row(color: Color) -> int:
    return BOARD_DIMENSIONS[0] - 2 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    """The opponent's back rank"""
    return 0 if color == Color.WHITE else BOARD_DIMENSIONS[0] - 1


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Sliding pieces (bishop, rook, queen)
    ---
    Walk each direction square by square. A ray stops at the edge of the board or at the first occupied square,
    which is included only when it holds an enemy piece.
    """
    moving_piece = board.get(square)
    assert moving_piece is not None

    targets: list[Square] = []
    for d_row, d_col in directions:
        target_square = square.offset(d_row, d_col)
        while target_square.is_within_bounds():
            occupant = board.get(target_square)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != moving_piece.color:
                    targets.append(target_square)
                break

            targets.append(target_square)
            target_square = target_square.offset(d_row, d_col)
    return targets


def single_step_move(
    square: Square, board: Board, deltas: list[Vector]
) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    moving_piece = board.get(square)
    assert moving_piece is not None

    targets: list[Square] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        occupant = board.get(target_square)
        if occupant is None or occupant.color != moving_piece.color:
            targets.append(target_square)
    return targets


def candidate_pawn_moves(square: Square, board: Board) -> list[Square]:
    """
    Pawns
    ---
    One square straight ahead onto an empty square, two from the starting row when both squares are empty,
    and a diagonal step forward only onto an enemy piece.

    NOTE: En passant is added separately, it depends on the previous move (see `en_passant_captures()`)
    """
    pawn = board.get(square)
    assert pawn is not None
    direction = forward(pawn.color)

    targets: list[Square] = []
    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        targets.append(one_step)

        two_steps = square.offset(2 * direction, 0)
        if square.row == pawn_starting_row(pawn.color) and board.is_empty(two_steps):
            targets.append(two_steps)

    for target_square in pawn_attack_squares(square, board):
        occupant = board.get(target_square)
        if occupant is not None and occupant.color != pawn.color:
            targets.append(target_square)
    return targets


def candidate_knight_moves(square: Square, board: Board) -> list[Square]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Square]:
    """Along ranks and files"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Square]:
    """Rook and bishop rays combined"""
    return candidate_rook_moves(square, board) + candidate_bishop_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Square]:
    """
    One square in any direction.

    Castling is modelled as a special king move (handled separately, it needs to know which squares are attacked).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Square]]
MOVEMENT_RULES: dict[PieceKind, CandidateMovesFn] = {
    PieceKind.PAWN: candidate_pawn_moves,
    PieceKind.KNIGHT: candidate_knight_moves,
    PieceKind.BISHOP: candidate_bishop_moves,
    PieceKind.ROOK: candidate_rook_moves,
    PieceKind.QUEEN: candidate_queen_moves,
    PieceKind.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def pawn_attack_squares(square: Square, board: Board) -> list[Square]:
    """
    Both diagonals in front of the pawn, whether or not something is standing there.
    """
    pawn = board.get(square)
    assert pawn is not None
    direction = forward(pawn.color)
    diagonals = [square.offset(direction, -1), square.offset(direction, 1)]
    return [target for target in diagonals if target.is_within_bounds()]


def king_attack_squares(square: Square, _board: Board) -> list[Square]:
    """
    All 8 neighbouring squares, regardless of what stands there.

    NOTE: Never includes castling. Castling asks which squares are attacked, so including it here would recurse.
    """
    neighbours = [square.offset(d_row, d_col) for d_row, d_col in KING_DELTAS]
    return [target for target in neighbours if target.is_within_bounds()]


# --- STRATEGY PATTERN: ATTACKING RULES ---
# Sliding and jumping pieces attack exactly where they could move to.
AttackSquaresFn = Callable[[Square, Board], list[Square]]
ATTACK_RULES: dict[PieceKind, AttackSquaresFn] = {
    PieceKind.PAWN: pawn_attack_squares,
    PieceKind.KNIGHT: candidate_knight_moves,
    PieceKind.BISHOP: candidate_bishop_moves,
    PieceKind.ROOK: candidate_rook_moves,
    PieceKind.QUEEN: candidate_queen_moves,
    PieceKind.KING: king_attack_squares,
}


# -- EN PASSANT MOVES ---
def en_passant_victim_square(from_square: Square, to_square: Square) -> Square:
    """The pawn taken en passant stands next to the capturing pawn: same row as where it started, same column as where it lands."""
    return Square(from_square.row, to_square.col)


def en_passant_captures(
    square: Square, board: Board, en_passant_target: Optional[Square]
) -> list[Square]:
    """
    Diagonal capture onto the (empty) square the opponent's pawn just skipped over.
    ---

    Only offered when the target sits on the row a pawn of this color captures into, and the pawn that skipped is still standing beside us.
    """
    pawn = board.get(square)
    if pawn is None or pawn.kind != PieceKind.PAWN or en_passant_target is None:
        return []

    if en_passant_target not in pawn_attack_squares(square, board):
        return []

    # the skipped square is one row in front of the opponent's pawn start row
    skipped_row = pawn_starting_row(pawn.color.opponent) + forward(pawn.color.opponent)
    if en_passant_target.row != skipped_row:
        return []

    victim = board.get(en_passant_victim_square(square, en_passant_target))
    if victim != Piece(PieceKind.PAWN, pawn.color.opponent):
        return []
    return [en_passant_target]


# -- PAWN PROMOTION --
def is_pawn_push_to_promotion_square(piece: Piece, to_square: Square) -> bool:
    """check if the move is a pawn move reaching the opponent's back rank"""
    return piece.kind == PieceKind.PAWN and to_square.row == promotion_row(piece.color)

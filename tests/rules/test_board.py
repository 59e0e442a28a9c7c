"""Unit tests for /src/rules/board.py"""

from typing import Callable

import pytest

from src.rules.board import STARTING_PLACEMENT, Board
from src.rules.pieces import Color, Piece, PieceKind
from src.rules.square import Square

EMPTY_PLACEMENT = "/".join(["8"] * 8)


@pytest.mark.parametrize(
    "placement",
    [
        STARTING_PLACEMENT,
        EMPTY_PLACEMENT,
        "r3k2r/pppq1ppp/2npbn2/4p3/2B1P3/2NP1N2/PPP2PPP/R1BQ1RK1",
        "8/4P3/8/8/8/8/k7/4K3",
    ],
)
def test_fen_roundtrip(placement: str) -> None:
    assert Board.from_fen(placement).to_fen() == placement


def test_starting_position() -> None:
    board = Board.starting_position()
    assert board.get(Square.from_algebraic("a8")) == Piece(PieceKind.ROOK, Color.BLACK)
    assert board.get(Square.from_algebraic("e1")) == Piece(PieceKind.KING, Color.WHITE)
    assert board.get(Square.from_algebraic("d8")) == Piece(PieceKind.QUEEN, Color.BLACK)
    assert board.is_empty(Square.from_algebraic("e4"))
    assert len(board.locate_color(Color.WHITE)) == 16
    assert len(board.locate_color(Color.BLACK)) == 16


def test_empty_board_has_64_empty_squares() -> None:
    board = Board.empty()
    assert len(board.position) == 64
    assert all(piece is None for piece in board.position.values())


def test_find_kings() -> None:
    board = Board.starting_position()
    assert board.find(PieceKind.KING, Color.WHITE) == Square.from_algebraic("e1")
    assert board.find(PieceKind.KING, Color.BLACK) == Square.from_algebraic("e8")
    assert Board.empty().find(PieceKind.KING, Color.WHITE) is None


def test_move_piece_returns_captured(make_board: Callable[[dict[str, str]], Board]) -> None:
    board = make_board({"d1": "Q", "d7": "p"})
    queen = board.get(Square.from_algebraic("d1"))

    captured = board.move_piece(Square.from_algebraic("d1"), Square.from_algebraic("d7"))

    assert captured == Piece(PieceKind.PAWN, Color.BLACK)
    assert board.is_empty(Square.from_algebraic("d1"))
    # the piece object itself is relocated
    assert board.get(Square.from_algebraic("d7")) is queen


def test_remove_piece(make_board: Callable[[dict[str, str]], Board]) -> None:
    board = make_board({"c5": "p"})
    removed = board.remove_piece(Square.from_algebraic("c5"))
    assert removed == Piece(PieceKind.PAWN, Color.BLACK)
    assert board.is_empty(Square.from_algebraic("c5"))


def test_clone_is_independent() -> None:
    """Changing the copy (including the pieces on it) must leave the original untouched"""
    board = Board.starting_position()
    copy = board.clone()

    copy.move_piece(Square.from_algebraic("e2"), Square.from_algebraic("e4"))
    copied_pawn = copy.get(Square.from_algebraic("a2"))
    assert copied_pawn is not None
    copied_pawn.promote_to(PieceKind.QUEEN)

    assert board.to_fen() == STARTING_PLACEMENT
    assert board.get(Square.from_algebraic("a2")) == Piece(PieceKind.PAWN, Color.WHITE)


def test_to_grid() -> None:
    grid = Board.starting_position().to_grid()
    assert len(grid) == 8
    assert grid[0] == ["r", "n", "b", "q", "k", "b", "n", "r"]
    assert grid[6] == ["P"] * 8
    assert grid[3] == [None] * 8

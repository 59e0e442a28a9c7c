"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Iterator

import pytest

from src.db.memory_repository import InMemoryGameRepository
from src.rules.board import Board
from src.rules.pieces import Piece
from src.rules.square import Square


@pytest.fixture
def make_board() -> Callable[[dict[str, str]], Board]:
    """Call the inner function with a mapping of square names to FEN letters, ex. {"e1": "K", "e8": "k"}"""

    def _create_board(pieces: dict[str, str]) -> Board:
        board = Board.empty()
        for square_name, fen_char in pieces.items():
            board.set(Square.from_algebraic(square_name), Piece.from_fen(fen_char))
        return board

    return _create_board


@pytest.fixture
def repository() -> Iterator[InMemoryGameRepository]:
    """Fresh repository for every test, so tests of the service are independent of each other."""
    yield InMemoryGameRepository()

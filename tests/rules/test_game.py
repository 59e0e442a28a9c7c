"""Unit tests for /src/rules/game.py"""

import logging

import pytest

from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidFENError,
    InvalidPromotionError,
)
from src.core.models import GameModel
from src.core.shared_types import Status
from src.rules.attacks import is_in_check
from src.rules.fen import STARTING_FEN
from src.rules.game import Game
from src.rules.legality import execute_move
from src.rules.moves import Move
from src.rules.pieces import Color, Piece, PieceKind
from src.rules.square import Square

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
EN_PASSANT_FEN = "4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1"
PROMOTION_FEN = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"

FOOLS_MATE = [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")]
SCHOLARS_MATE = [
    ("e2", "e4"),
    ("e7", "e5"),
    ("f1", "c4"),
    ("b8", "c6"),
    ("d1", "h5"),
    ("g8", "f6"),
    ("h5", "f7"),
]


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def play(game: Game, moves: list[tuple[str, str]]) -> None:
    for from_name, to_name in moves:
        game.apply_move(sq(from_name), sq(to_name))


def names(targets: set[Square]) -> set[str]:
    return {target.to_algebraic() for target in targets}


# -- CREATION LOGIC --
def test_new_game() -> None:
    game = Game.new_game()
    assert game.to_fen() == STARTING_FEN
    assert game.turn == Color.WHITE
    assert game.status == Status.ONGOING
    assert game.castling_rights.to_fen() == "KQkq"
    assert game.en_passant_target is None
    assert game.history == []
    assert game.last_move is None
    assert not game.awaiting_promotion


def test_twenty_legal_moves_at_the_start() -> None:
    game = Game.new_game()
    assert sum(len(targets) for targets in game.all_legal_moves().values()) == 20
    assert names(game.legal_moves(sq("g1"))) == {"f3", "h3"}
    assert names(game.legal_moves(sq("e2"))) == {"e3", "e4"}


@pytest.mark.parametrize("square_name", ["e7", "g8", "e4", "a5"])
def test_no_legal_moves_for_opponent_or_empty_square(square_name: str) -> None:
    assert Game.new_game().legal_moves(sq(square_name)) == set()


def test_from_fen_computes_status() -> None:
    """Position right after fool's mate: black has already won"""
    game = Game.from_fen("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3")
    assert game.status == Status.CHECKMATE
    assert game.winner == Color.BLACK


@pytest.mark.parametrize(
    "fen",
    [
        # white to move, black king on e8 already attacked by the rook on e1
        "4k3/8/8/8/8/8/8/4R1K1 w - - 0 1",
        # black to move, white king on e1 already attacked by the bishop on b4
        "4k3/8/8/8/1b6/8/8/4K3 b - - 0 1",
    ],
)
def test_from_fen_rejects_opponent_in_check(fen: str) -> None:
    """The king of the side that just moved would be capturable"""
    with pytest.raises(InvalidFENError):
        Game.from_fen(fen)


def test_games_are_independent() -> None:
    game = Game.new_game()
    other_game = Game.new_game()
    game.apply_move(sq("e2"), sq("e4"))
    assert other_game.to_fen() == STARTING_FEN


# -- MAKING MOVES --
def test_apply_move_updates_state() -> None:
    game = Game.new_game()
    game.apply_move(sq("e2"), sq("e4"))

    assert game.turn == Color.BLACK
    assert game.en_passant_target == sq("e3")
    assert game.history == ["e4"]
    assert game.last_move == Move(sq("e2"), sq("e4"))
    assert game.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


def test_move_counters() -> None:
    game = Game.new_game()
    play(game, [("e2", "e4"), ("e7", "e5"), ("g1", "f3")])
    assert game.half_move_clock == 1
    assert game.full_move_number == 2
    assert game.to_fen().endswith(" 1 2")


@pytest.mark.parametrize(
    "from_name, to_name",
    [("e2", "e5"), ("e7", "e5"), ("e4", "e5"), ("g1", "g3"), ("e1", "e2")],
)
def test_illegal_move_is_rejected(from_name: str, to_name: str) -> None:
    """Nothing changes when a move gets rejected"""
    game = Game.new_game()
    with pytest.raises(IllegalMoveError):
        game.apply_move(sq(from_name), sq(to_name))
    assert game.to_fen() == STARTING_FEN
    assert game.history == []


def test_own_king_never_left_in_check() -> None:
    """Walk through a full game: every legal move, tried out, keeps the mover's king safe"""
    game = Game.new_game()
    for from_name, to_name in SCHOLARS_MATE:
        for square, targets in game.all_legal_moves().items():
            for target in targets:
                board = game.board.clone()
                execute_move(board, square, target)
                assert not is_in_check(game.turn, board)
        game.apply_move(sq(from_name), sq(to_name))


# -- EN PASSANT --
def test_en_passant_capture() -> None:
    game = Game.from_fen(EN_PASSANT_FEN)
    game.apply_move(sq("e2"), sq("e4"))
    assert sq("e3") in game.legal_moves(sq("d4"))

    game.apply_move(sq("d4"), sq("e3"))
    assert game.board.is_empty(sq("e4"))
    assert game.board.get(sq("e3")) == Piece(PieceKind.PAWN, Color.BLACK)
    assert game.history == ["e4", "dxe3"]
    assert game.en_passant_target is None


def test_en_passant_only_on_the_next_move() -> None:
    game = Game.from_fen(EN_PASSANT_FEN)
    play(game, [("e2", "e4"), ("e8", "e7"), ("e1", "f1")])
    assert names(game.legal_moves(sq("d4"))) == {"d3"}


# -- CASTLING --
@pytest.mark.parametrize(
    "king_to, rook_from, rook_to, notation, remaining_rights",
    [("g1", "h1", "f1", "O-O", "kq"), ("c1", "a1", "d1", "O-O-O", "kq")],
)
def test_castling(
    king_to: str, rook_from: str, rook_to: str, notation: str, remaining_rights: str
) -> None:
    game = Game.from_fen(CASTLING_FEN)
    assert {"g1", "c1"} <= names(game.legal_moves(sq("e1")))

    game.apply_move(sq("e1"), sq(king_to))
    assert game.board.get(sq(king_to)) == Piece(PieceKind.KING, Color.WHITE)
    assert game.board.get(sq(rook_to)) == Piece(PieceKind.ROOK, Color.WHITE)
    assert game.board.is_empty(sq(rook_from))
    assert game.board.is_empty(sq("e1"))
    assert game.history == [notation]
    assert game.castling_rights.to_fen() == remaining_rights


@pytest.mark.parametrize(
    "fen, allowed",
    [
        ("4k3/8/8/8/8/8/8/4K2R w K - 0 1", True),
        # right revoked
        ("4k3/8/8/8/8/8/8/4K2R w - - 0 1", False),
        # piece in between
        ("4k3/8/8/8/8/8/8/4KB1R w K - 0 1", False),
        # f1 attacked
        ("4kr2/8/8/8/8/8/8/4K2R w K - 0 1", False),
        # g1 attacked
        ("4k1r1/8/8/8/8/8/8/4K2R w K - 0 1", False),
        # in check
        ("4r1k1/8/8/8/8/8/8/4K2R w K - 0 1", False),
    ],
)
def test_castling_conditions(fen: str, allowed: bool) -> None:
    game = Game.from_fen(fen)
    assert (sq("g1") in game.legal_moves(sq("e1"))) == allowed


def test_castling_rights_never_come_back() -> None:
    """The king returns to its square, but castling stays impossible"""
    game = Game.from_fen(CASTLING_FEN)
    play(game, [("e1", "f1"), ("a8", "b8"), ("f1", "e1")])
    assert game.castling_rights.to_fen() == "k"
    assert names(game.legal_moves(sq("e1"))) & {"g1", "c1"} == set()


def test_capturing_a_rook_revokes_its_right() -> None:
    game = Game.from_fen(CASTLING_FEN)
    game.apply_move(sq("a1"), sq("a8"))
    assert game.castling_rights.to_fen() == "Kk"
    assert game.history == ["Rxa8+"]
    assert game.in_check_square == sq("e8")
    assert game.status == Status.ONGOING


# -- PROMOTION --
def test_promotion_waits_for_choice() -> None:
    game = Game.from_fen(PROMOTION_FEN)
    pawn = game.board.get(sq("e7"))
    game.apply_move(sq("e7"), sq("e8"))

    assert game.awaiting_promotion
    assert game.turn == Color.WHITE
    assert game.history == []
    assert game.all_legal_moves() == {}
    assert game.legal_moves(sq("e1")) == set()
    with pytest.raises(GameStateError):
        game.apply_move(sq("e1"), sq("d1"))

    game.choose_promotion(PieceKind.QUEEN)

    promoted = game.board.get(sq("e8"))
    assert promoted is pawn
    assert promoted == Piece(PieceKind.QUEEN, Color.WHITE)
    assert not game.awaiting_promotion
    assert game.turn == Color.BLACK
    assert game.history == ["e8=Q"]
    assert game.moves[-1].to_uci() == "e7e8q"


@pytest.mark.parametrize(
    "fen, from_name, to_name, kind, notation, status",
    [
        ("k7/4P3/8/8/8/8/8/4K3 w - - 0 1", "e7", "e8", PieceKind.QUEEN, "e8=Q+", Status.ONGOING),
        ("k7/4P3/8/8/8/8/8/4K3 w - - 0 1", "e7", "e8", PieceKind.KNIGHT, "e8=N", Status.ONGOING),
        ("3r3k/4P3/8/8/8/8/8/4K3 w - - 0 1", "e7", "d8", PieceKind.QUEEN, "exd8=Q+", Status.ONGOING),
        ("k7/4P3/1K6/8/8/8/8/8 w - - 0 1", "e7", "e8", PieceKind.ROOK, "e8=R#", Status.CHECKMATE),
        ("4k3/8/8/8/8/8/3p4/7K b - - 0 1", "d2", "d1", PieceKind.QUEEN, "d1=Q+", Status.ONGOING),
    ],
)
def test_promotion_notation(
    fen: str,
    from_name: str,
    to_name: str,
    kind: PieceKind,
    notation: str,
    status: Status,
) -> None:
    game = Game.from_fen(fen)
    game.apply_move(sq(from_name), sq(to_name))
    game.choose_promotion(kind)
    assert game.history == [notation]
    assert game.status == status


def test_choose_promotion_without_pawn() -> None:
    with pytest.raises(GameStateError):
        Game.new_game().choose_promotion(PieceKind.QUEEN)


@pytest.mark.parametrize("kind", [PieceKind.KING, PieceKind.PAWN])
def test_invalid_promotion_choice(kind: PieceKind) -> None:
    game = Game.from_fen(PROMOTION_FEN)
    game.apply_move(sq("e7"), sq("e8"))
    with pytest.raises(InvalidPromotionError):
        game.choose_promotion(kind)
    assert game.awaiting_promotion
    assert game.board.get(sq("e8")) == Piece(PieceKind.PAWN, Color.WHITE)


# -- END OF GAME --
def test_fools_mate() -> None:
    game = Game.new_game()
    play(game, FOOLS_MATE)

    assert game.history == ["f3", "e5", "g4", "Qh4#"]
    assert game.status == Status.CHECKMATE
    assert game.is_over
    assert game.winner == Color.BLACK
    assert game.in_check_square == sq("e1")
    assert game.all_legal_moves() == {}
    with pytest.raises(GameStateError):
        game.apply_move(sq("e2"), sq("e4"))


def test_scholars_mate() -> None:
    game = Game.new_game()
    play(game, SCHOLARS_MATE)
    assert game.history[-1] == "Qxf7#"
    assert game.winner == Color.WHITE


def test_stalemate() -> None:
    game = Game.from_fen("k7/8/8/2Q5/8/8/8/4K3 w - - 0 1")
    game.apply_move(sq("c5"), sq("c7"))

    assert game.status == Status.STALEMATE
    assert game.history == ["Qc7"]
    assert game.winner is None
    assert game.in_check_square is None
    with pytest.raises(GameStateError):
        game.apply_move(sq("a8"), sq("b8"))


def test_game_over_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="src.rules.game")
    game = Game.new_game()
    play(game, FOOLS_MATE)
    assert "checkmate" in caplog.text


# -- RESET --
def test_reset() -> None:
    game = Game.from_fen(CASTLING_FEN)
    play(game, [("h1", "h8"), ("e8", "d7")])
    game.reset()
    assert game == Game.new_game()
    assert game.castling_rights.to_fen() == "KQkq"


def test_reset_while_waiting_for_promotion() -> None:
    game = Game.from_fen(PROMOTION_FEN)
    game.apply_move(sq("e7"), sq("e8"))
    game.reset()
    assert not game.awaiting_promotion
    assert game.to_fen() == STARTING_FEN
    assert game.history == []
    assert game.moves == []
    assert game.last_move is None


# -- TRANSPORT MODEL --
def test_model_roundtrip() -> None:
    game = Game.new_game()
    play(game, [("e2", "e4"), ("d7", "d5"), ("e4", "d5")])

    model = game.to_model()
    assert model.move_history == ["e4", "d5", "exd5"]
    assert model.moves_uci == ["e2e4", "d7d5", "e4d5"]
    assert model.last_move_uci == "e4d5"
    assert Game.from_model(model) == game


def test_model_roundtrip_with_pending_promotion() -> None:
    game = Game.from_fen(PROMOTION_FEN)
    game.apply_move(sq("e7"), sq("e8"))

    model = game.to_model()
    assert model.pending_promotion_square == "e8"
    restored = Game.from_model(model)
    assert restored == game

    restored.choose_promotion(PieceKind.QUEEN)
    assert restored.history == ["e8=Q"]


def test_model_with_unknown_status() -> None:
    with pytest.raises(GameStateError):
        Game.from_model(GameModel(current_fen=STARTING_FEN, status="resigned"))

"""
A single game of chess and everything that has to be remembered between turns:
whose turn it is, castling rights, the en passant square, the move history, and whether the game has ended.
"""

import logging
from dataclasses import dataclass, fields
from typing import Optional, Self

from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidFENError,
    InvalidPromotionError,
)
from src.core.models import GameModel
from src.core.shared_types import Status
from src.rules.attacks import is_in_check, king_square
from src.rules.board import Board
from src.rules.castling import CastlingRights
from src.rules.fen import STARTING_FEN, FENState
from src.rules.legality import (
    MoveEffects,
    all_legal_moves as all_legal_moves_for_color,
    execute_move,
    has_legal_move,
    legal_moves as legal_moves_from_square,
)
from src.rules.moves import Move
from src.rules.notation import move_notation, promotion_suffix, status_suffix
from src.rules.pieces import PROMOTION_OPTIONS, Color, PieceKind
from src.rules.square import Square

_LOGGER = logging.getLogger(__name__)


@dataclass
class PendingPromotion:
    """A pawn reached the last rank. The turn is not over until the player picks the piece it becomes."""

    square: Square
    notation: str  # notation of the move so far (without "=Q" and check marks)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    turn: Color
    castling_rights: CastlingRights
    en_passant_target: Optional[Square]
    history: list[str]  # short algebraic notation, in the order the moves were played
    moves: list[Move]
    status: Status
    last_move: Optional[Move] = None
    pending_promotion: Optional[PendingPromotion] = None
    half_move_clock: int = 0
    full_move_number: int = 1

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, white to move, all castling rights available."""
        return cls.from_fen(STARTING_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Start a game from the position described by the FEN string (no moves played yet)."""
        state = FENState.from_fen(fen)
        board = Board.from_fen(state.position)
        if is_in_check(state.color_to_move.opponent, board):
            raise InvalidFENError(
                f"Side not to move cannot be in check, its king could be captured: {fen}"
            )

        game = cls(
            board=board,
            turn=state.color_to_move,
            castling_rights=state.castling_rights,
            en_passant_target=state.en_passant_square,
            history=[],
            moves=[],
            status=Status.ONGOING,
            half_move_clock=state.half_move_clock,
            full_move_number=state.num_turns,
        )
        game.status = game._compute_status()
        return game

    def to_fen(self) -> str:
        return FENState(
            position=self.board.to_fen(),
            color_to_move=self.turn,
            castling_rights=self.castling_rights,
            en_passant_square=self.en_passant_target,
            half_move_clock=self.half_move_clock,
            num_turns=self.full_move_number,
        ).to_fen()

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Rebuild a game from its stored record"""

        # Validation
        if model.status not in [status.value for status in Status]:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.value for status in Status])}"
            )

        game = cls.from_fen(model.current_fen)
        game.history = list(model.move_history)
        game.moves = [Move.from_uci(uci) for uci in model.moves_uci]
        game.last_move = (
            Move.from_uci(model.last_move_uci) if model.last_move_uci else None
        )
        if model.pending_promotion_square is not None:
            game.pending_promotion = PendingPromotion(
                square=Square.from_algebraic(model.pending_promotion_square),
                notation=model.pending_promotion_notation or "",
            )
            # the mover still has the turn, only finalizing it decides the status
            game.status = Status.ONGOING
        return game

    def to_model(self) -> GameModel:
        """Record for the repository"""
        pending = self.pending_promotion
        return GameModel(
            current_fen=self.to_fen(),
            move_history=list(self.history),
            moves_uci=[move.to_uci() for move in self.moves],
            status=self.status.value,
            last_move_uci=self.last_move.to_uci() if self.last_move else None,
            pending_promotion_square=pending.square.to_algebraic() if pending else None,
            pending_promotion_notation=pending.notation if pending else None,
        )

    def reset(self) -> None:
        """Start over from the standard starting position. Nothing of the previous game survives."""
        fresh_game = self.new_game()
        for game_field in fields(self):
            setattr(self, game_field.name, getattr(fresh_game, game_field.name))
        _LOGGER.debug("Game reset to the starting position")

    # --- READ-ONLY VIEWS ---
    @property
    def is_over(self) -> bool:
        return self.status != Status.ONGOING

    @property
    def awaiting_promotion(self) -> bool:
        return self.pending_promotion is not None

    @property
    def winner(self) -> Optional[Color]:
        """Only checkmate has a winner: the opponent of the player who got mated (the one to move)."""
        if self.status != Status.CHECKMATE:
            return None
        return self.turn.opponent

    def is_in_check(self, color: Color) -> bool:
        return is_in_check(color, self.board)

    @property
    def in_check_square(self) -> Optional[Square]:
        """Square of the king that is currently in check (if any). Used to highlight it."""
        for color in (Color.WHITE, Color.BLACK):
            if self.is_in_check(color):
                return king_square(color, self.board)
        return None

    # --- LEGAL MOVE GENERATION ---
    def legal_moves(self, square: Square) -> set[Square]:
        """
        Squares the piece on `square` may move to.
        ----

        Empty when there is no piece, when it is not that piece's turn, while waiting for a promotion choice, or once the game is over.
        """
        if self.is_over or self.awaiting_promotion:
            return set()

        piece = self.board.get(square)
        if piece is None or piece.color != self.turn:
            return set()

        return legal_moves_from_square(
            square, self.board, self.castling_rights, self.en_passant_target
        )

    def all_legal_moves(self) -> dict[Square, set[Square]]:
        """Legal moves of every piece of the player to move, keyed by the square the piece stands on."""
        if self.is_over or self.awaiting_promotion:
            return {}
        return all_legal_moves_for_color(
            self.turn, self.board, self.castling_rights, self.en_passant_target
        )

    # --- MAKING MOVES ---
    def apply_move(self, from_square: Square, to_square: Square) -> None:
        """
        Play a move
        -----

        1. execute the move on the board (en passant: remove the pawn passed, castling: move the rook along)
        2. update the en passant square
        3. revoke castling rights (if needed)
        4. pawn reached the last rank? --> wait for `choose_promotion()` before finishing the turn
        5. otherwise finish the turn: switch player, update game status, record the move
        """
        self._assert_accepting_moves()

        if to_square not in self.legal_moves(from_square):
            raise IllegalMoveError(
                f"Move not allowed: {from_square.to_algebraic()}{to_square.to_algebraic()}"
            )

        effects = execute_move(self.board, from_square, to_square)
        notation = move_notation(from_square, to_square, effects)
        self.last_move = Move(from_square, to_square)

        self._update_en_passant_target(from_square, to_square, effects)
        self._revoke_castling_rights_if_needed(from_square, to_square, effects)
        self._update_half_move_clock(effects)

        if effects.reaches_promotion_square:
            self.pending_promotion = PendingPromotion(to_square, notation)
            _LOGGER.debug("Waiting for promotion choice on %s", to_square.to_algebraic())
            return

        self.moves.append(self.last_move)
        self._finalize_turn(notation)

    def choose_promotion(self, kind: PieceKind) -> None:
        """Finish the turn of a pawn that reached the last rank, by turning it into the chosen piece."""
        if self.pending_promotion is None:
            raise GameStateError("There is no pawn waiting to be promoted.")

        if kind not in PROMOTION_OPTIONS:
            raise InvalidPromotionError(
                f"Cannot promote to {kind.name.lower()}. Pick one from {','.join([option.name.lower() for option in PROMOTION_OPTIONS])}"
            )

        pending = self.pending_promotion
        pawn = self.board.get(pending.square)
        assert pawn is not None and self.last_move is not None
        pawn.promote_to(kind)

        self.pending_promotion = None
        self.moves.append(
            Move(self.last_move.from_square, self.last_move.to_square, promote_to=kind)
        )
        self._finalize_turn(pending.notation + promotion_suffix(kind))

    # -- PRIVATE HELPERS ---
    def _assert_accepting_moves(self) -> None:
        if self.is_over:
            raise GameStateError(f"Game is not in progress. status: {self.status}")
        if self.awaiting_promotion:
            raise GameStateError(
                "Choose a piece to promote into before making another move."
            )

    def _finalize_turn(self, notation: str) -> None:
        """
        Switch players, then work out the status from the new player's perspective.
        Only then is it known whether the notation gets a check (+) or checkmate (#) mark.
        """
        if self.turn == Color.BLACK:
            self.full_move_number += 1
        self.turn = self.turn.opponent

        self.status = self._compute_status()
        suffix = status_suffix(self.status, self.is_in_check(self.turn))
        self.history.append(notation + suffix)

        _LOGGER.debug("Played %s", notation + suffix)
        if self.is_over:
            _LOGGER.info(
                "Game over after %d moves: %s", len(self.history), self.status.value
            )

    def _compute_status(self) -> Status:
        """No legal move left: checkmate when in check, stalemate otherwise."""
        if has_legal_move(
            self.turn, self.board, self.castling_rights, self.en_passant_target
        ):
            return Status.ONGOING
        if self.is_in_check(self.turn):
            return Status.CHECKMATE
        return Status.STALEMATE

    # --- EN PASSANT RULE HELPERS ----
    def _update_en_passant_target(
        self, from_square: Square, to_square: Square, effects: MoveEffects
    ) -> None:
        """A pawn that advanced two squares can be taken on the square it skipped, but only on the very next move."""
        if effects.is_double_advance:
            self.en_passant_target = Square(
                (from_square.row + to_square.row) // 2, from_square.col
            )
        else:
            self.en_passant_target = None

    # -- CASTLING RULE HELPERS ---
    def _revoke_castling_rights_if_needed(
        self, from_square: Square, to_square: Square, effects: MoveEffects
    ) -> None:
        """
        Castling rights lost by this move
        ----

        1. If you are moving your king (castling included) --> revoke both
        2. If a piece leaves a rook's starting square --> that rook moved: revoke the rights in its direction
        3. If a piece lands on a rook's starting square --> that rook got captured: revoke the rights in its direction
        """
        if effects.moved_piece.kind == PieceKind.KING:
            self.castling_rights.revoke_all(effects.moved_piece.color)

        self.castling_rights.revoke_for_square(from_square)
        self.castling_rights.revoke_for_square(to_square)

    # --- HALF MOVE CLOCK HELPERS ---
    def _update_half_move_clock(self, effects: MoveEffects) -> None:
        if effects.moved_piece.kind == PieceKind.PAWN or effects.is_capture:
            self.half_move_clock = 0
        else:
            self.half_move_clock += 1

"""Orchestration of communication from the UI (via request models) to business logic and storage layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LastMove,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PromotionRequest,
    ResetGameRequest,
)
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidPromotionError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color
from src.db.repository import GameRepository
from src.rules.game import Game
from src.rules.pieces import PieceKind
from src.rules.square import Square

_LOGGER = logging.getLogger(__name__)

# Breaking the rules is reported back to the caller (the game is left untouched), it is not a crash
REJECTED_MOVE_ERRORS = (IllegalMoveError, GameStateError, InvalidPromotionError)


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- UI facing logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game, from the standard starting position unless a FEN was supplied."""
        new_game = (
            Game.from_fen(request.starting_fen)
            if request.starting_fen
            else Game.new_game()
        )
        _, game_id = self.repo.create_game(new_game.to_model())
        _LOGGER.info("Created game %s", game_id)
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used by the UI to redraw the board, the move list, and the status line.
        """
        game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Squares the piece on the selected square can move to (empty if it is not that piece's turn)."""
        game = Game.from_model(self._fetch_game(request.game_id))
        targets = game.legal_moves(Square.from_algebraic(request.square))
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            legal_moves=sorted(target.to_algebraic() for target in targets),
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt."""
        game = Game.from_model(self._fetch_game(request.game_id))
        try:
            game.apply_move(
                Square.from_algebraic(request.from_square),
                Square.from_algebraic(request.to_square),
            )
        except REJECTED_MOVE_ERRORS as error:
            return self._reject(request.game_id, game, error)

        self.repo.update_game(request.game_id, game.to_model())
        return MoveResponse(
            accepted=True, game=self._create_game_response(request.game_id, game)
        )

    def choose_promotion(self, request: PromotionRequest) -> MoveResponse:
        """Finish a move that brought a pawn to the last rank."""
        game = Game.from_model(self._fetch_game(request.game_id))
        try:
            game.choose_promotion(PieceKind[request.promote_to.name])
        except REJECTED_MOVE_ERRORS as error:
            return self._reject(request.game_id, game, error)

        self.repo.update_game(request.game_id, game.to_model())
        return MoveResponse(
            accepted=True, game=self._create_game_response(request.game_id, game)
        )

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start the game over from the standard starting position."""
        game = Game.from_model(self._fetch_game(request.game_id))
        game.reset()
        self.repo.update_game(request.game_id, game.to_model())
        _LOGGER.info("Reset game %s", request.game_id)
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with {request.game_id=} not found.")

    # -- Internal helpers --
    def _reject(self, game_id: UUID, game: Game, error: Exception) -> MoveResponse:
        """Nothing was changed on the game: report why, together with the (unchanged) state."""
        _LOGGER.warning("Rejected request for game %s: %s", game_id, error)
        return MoveResponse(
            accepted=False,
            reason=str(error),
            game=self._create_game_response(game_id, game),
        )

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert a Game into a GameResponse (for game with given ID.)"""
        in_check_square = game.in_check_square
        winner = game.winner
        return GameResponse(
            game_id=game_id,
            fen_state=game.to_fen(),
            board=game.board.to_grid(),
            turn=Color[game.turn.name],
            status=game.status,
            winner=Color[winner.name] if winner else None,
            in_check_square=in_check_square.to_algebraic() if in_check_square else None,
            move_history=list(game.history),
            last_move=(
                LastMove(
                    from_square=game.last_move.from_square.to_algebraic(),
                    to_square=game.last_move.to_square.to_algebraic(),
                )
                if game.last_move
                else None
            ),
            pending_promotion=(
                game.pending_promotion.square.to_algebraic()
                if game.pending_promotion
                else None
            ),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

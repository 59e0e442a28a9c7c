"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PromotionChoice, Status
from src.rules.fen import is_valid_fen, is_valid_square

SquareName = str  # algebraic coordinate, ex. "e4"
PieceLetter = str  # FEN letter, ex. "K" (white king) or "p" (black pawn)


def _validate_square_name(value: str) -> str:
    if not is_valid_square(value) or len(value) != 2:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        )
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        if not is_valid_fen(value.strip()):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a FEN string.")
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class PromotionRequest(BaseModel):
    game_id: UUID
    promote_to: PromotionChoice


class ResetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class LastMove(BaseModel):
    from_square: SquareName
    to_square: SquareName


class GameResponse(BaseModel):
    """Read-only snapshot of a game: everything needed to draw the board, the move list and the status line."""

    game_id: UUID
    fen_state: str
    board: list[list[Optional[PieceLetter]]]  # row 0 is the 8th rank, column 0 the a-file
    turn: Color
    status: Status
    winner: Optional[Color]
    in_check_square: Optional[SquareName]
    move_history: list[str]
    last_move: Optional[LastMove]
    pending_promotion: Optional[SquareName]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: SquareName
    legal_moves: list[SquareName]


class MoveResponse(BaseModel):
    """Outcome of a move / promotion request. A rejected request leaves the game untouched."""

    accepted: bool
    reason: Optional[str] = None
    game: GameResponse

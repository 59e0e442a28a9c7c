"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/repository layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the repository, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service, repository, and Game layers."""

    current_fen: str
    move_history: list[str] = field(default_factory=list)  # short algebraic notation
    moves_uci: list[str] = field(default_factory=list)
    status: str = "ongoing"
    last_move_uci: Optional[str] = None
    # a pawn waiting on the last rank for the player to pick a piece (algebraic square + notation of the move so far)
    pending_promotion_square: Optional[str] = None
    pending_promotion_notation: Optional[str] = None

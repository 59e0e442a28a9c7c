"""Storage interface the service depends on. InMemoryGameRepository (memory_repository.py) is the implementation shipped."""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Keeps GameModel records by game ID"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """None when no game has this ID"""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store a new record. The ID is handed out by the repository."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the record. None when no game has this ID"""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Returns the removed record (None if there was nothing to remove)"""
        ...

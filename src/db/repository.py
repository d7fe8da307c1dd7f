"""Protocol repository (the in-memory store implements it, anything else can later)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameRecord


class GameRepository(Protocol):
    """Game storage orchestration"""

    def get_game(self, game_id: UUID) -> GameRecord | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameRecord) -> tuple[GameRecord, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameRecord) -> GameRecord | None:
        """Replace the record of an existing game."""
        ...

    def delete_game(self, game_id: UUID) -> GameRecord | None:
        """Remove a game's record."""
        ...

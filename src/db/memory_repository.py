"""Implementation of (Game)Repository keeping every game in memory for the lifetime of the process"""

import logging
from uuid import UUID, uuid4

from src.core.models import GameRecord

logger = logging.getLogger(__name__)


class InMemoryGameRepository:
    """Games stored in a dict keyed by game id. Nothing survives a restart."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameRecord] = {}

    def get_game(self, game_id: UUID) -> GameRecord | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def create_game(self, game: GameRecord) -> tuple[GameRecord, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        new_id = uuid4()
        self._games[new_id] = game
        logger.debug("Stored new game %s", new_id)
        return game, new_id

    def update_game(self, game_id: UUID, game: GameRecord) -> GameRecord | None:
        """Replace the record of an existing game."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameRecord | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def __len__(self) -> int:
        return len(self._games)

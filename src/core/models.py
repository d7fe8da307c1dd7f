"""
Boundary layer data model(s).

What the Service keeps per game between two requests. Both the db layer (stores it) and the Service (reads and
replaces it) use the model defined here.
"""

from dataclasses import dataclass, replace
from typing import Self

from src.core.shared_types import Color
from src.royale.randomness import RandomSource
from src.royale.state import GameState


@dataclass(frozen=True)
class GameRecord:
    """One game: the current snapshot, the random source that drives it and which side the human plays."""

    state: GameState
    rng: RandomSource
    human_color: Color
    seed: int | None = None

    def with_state(self, state: GameState) -> Self:
        return replace(self, state=state)

    @property
    def computer_color(self) -> Color:
        return self.human_color.opponent

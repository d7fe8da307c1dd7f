"""
The one source of randomness of the engine.

Every function that needs a random decision (computer move variety, power-up type and square, respawn type and
square, which pawn transforms and into what) takes an explicit `rng` argument. Seed it to replay a game exactly.
"""

import random
from typing import Hashable, Mapping, Optional, Sequence, TypeVar

RandomSource = random.Random

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def make_rng(seed: Optional[int] = None) -> RandomSource:
    return random.Random(seed)


def weighted_choice(rng: RandomSource, weights: Mapping[K, float]) -> K:
    """Pick one option with a probability proportional to its weight. Zero weights never get picked."""
    options = [option for option, weight in weights.items() if weight > 0]
    return rng.choices(options, weights=[weights[option] for option in options])[0]


def choose(rng: RandomSource, candidates: Sequence[T]) -> Optional[T]:
    """Uniform pick, or None if there is nothing to choose from"""
    if not candidates:
        return None
    return candidates[rng.randrange(len(candidates))]

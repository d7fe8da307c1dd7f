"""
The GameState snapshot and the small value types it is made of.

A GameState is created once (`create_initial_game_state`) and afterwards only ever replaced by a new value
derived from the previous one. None of the engine's functions change a state in place.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional, Self

from src.core.config import DEFAULT_CONFIG, EngineConfig
from src.core.shared_types import Color, GamePhase, Outcome, PowerUpType
from src.royale.board import Board
from src.royale.moves import Move
from src.royale.pieces import Piece
from src.royale.position import Position


@dataclass(frozen=True)
class PowerUp:
    """Collectible item lying on the board (or held by a player once collected)"""

    identity: str
    type: PowerUpType
    position: Position
    turns_until_despawn: int


@dataclass(frozen=True)
class ShrinkBlock:
    """A square that will be removed from play once the countdown runs out"""

    position: Position
    turns_until_shrink: int
    is_warning: bool = True


@dataclass(frozen=True)
class RespawnEntry:
    """A captured piece owed to its owner"""

    owner: Color
    piece: Piece


def _no_power_ups() -> Mapping[Color, Optional[PowerUp]]:
    return {color: None for color in Color}


@dataclass(frozen=True)
class GameState:
    board: Board
    current_player: Color = Color.WHITE
    game_phase: GamePhase = GamePhase.PLAYING
    winner: Optional[Outcome] = None

    # The master clock: +1 for every completed move. Drives every periodic mechanic.
    turn_count: int = 0

    # Keys ("row-col") of squares removed from play. Only ever grows.
    shrunk_squares: frozenset[str] = frozenset()
    shrink_blocks: tuple[ShrinkBlock, ...] = ()

    captured_pieces: tuple[Piece, ...] = ()
    respawn_queue: tuple[RespawnEntry, ...] = ()

    power_ups: tuple[PowerUp, ...] = ()
    player_power_ups: Mapping[Color, Optional[PowerUp]] = field(
        default_factory=_no_power_ups
    )

    # --- power-up side effects ---
    trap_squares: Mapping[str, Color] = field(default_factory=dict)  # key -> owner
    shielded_pieces: Mapping[str, int] = field(default_factory=dict)  # identity -> turns left
    extra_moves: frozenset[Color] = frozenset()
    teleports: Mapping[Color, PowerUp] = field(default_factory=dict)  # armed teleports

    last_move: Optional[Move] = None
    config: EngineConfig = DEFAULT_CONFIG

    # compared field by field, never hashed (the mapping fields are not hashable)
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        for name in (
            "player_power_ups",
            "trap_squares",
            "shielded_pieces",
            "teleports",
        ):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def evolve(self, **changes) -> Self:
        """New snapshot with some fields replaced"""
        return replace(self, **changes)

    @property
    def is_playing(self) -> bool:
        return self.game_phase == GamePhase.PLAYING

    def held_power_up(self, color: Color) -> Optional[PowerUp]:
        return self.player_power_ups.get(color)

    def power_up_at(self, square: Position) -> Optional[PowerUp]:
        return next(
            (power_up for power_up in self.power_ups if power_up.position == square),
            None,
        )

    def is_shrunk(self, square: Position) -> bool:
        return square.key in self.shrunk_squares

    def is_shielded(self, piece: Piece) -> bool:
        return piece.identity in self.shielded_pieces

    def shrink_block_at(self, square: Position) -> Optional[ShrinkBlock]:
        return next(
            (block for block in self.shrink_blocks if block.position == square), None
        )


def create_initial_game_state(config: Optional[EngineConfig] = None) -> GameState:
    """Standard starting position, White to move"""
    return GameState(
        board=Board.starting_position(),
        config=config if config is not None else DEFAULT_CONFIG,
    )

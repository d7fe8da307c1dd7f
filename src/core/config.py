"""
Engine configuration.

One EngineConfig is attached to a GameState when the game is created and never changes afterwards,
so every periodic mechanic keeps the same cadence for the whole game.
"""

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from src.core.shared_types import Color, PieceType

# Respawned pieces get a fresh random type. Pawns are common, queens rare and kings never come back.
RESPAWN_WEIGHTS: dict[PieceType, int] = {
    PieceType.PAWN: 40,
    PieceType.KNIGHT: 20,
    PieceType.BISHOP: 20,
    PieceType.ROOK: 20,
    PieceType.QUEEN: 5,
    PieceType.KING: 0,
}

# Veteran pawns become one of these
TRANSFORMATION_WEIGHTS: dict[PieceType, int] = {
    PieceType.KNIGHT: 40,
    PieceType.BISHOP: 30,
    PieceType.ROOK: 20,
    PieceType.QUEEN: 10,
}


class EngineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    # --- shrinking board ---
    shrink_cycle: int = 12
    shrink_lead: int = 5  # squares vanish this many turns before the cycle ends
    max_shrink_level: int = 3

    # --- respawn ---
    respawn_interval: int = 15
    respawn_weights: dict[PieceType, int] = RESPAWN_WEIGHTS

    # --- power-ups ---
    power_up_interval: int = 12
    power_up_lifetime: int = 6
    shield_duration: int = 3

    # --- transformations ---
    transformation_interval: int = 25
    transformation_threshold: int = 5
    transformation_weights: dict[PieceType, int] = TRANSFORMATION_WEIGHTS

    # --- computer player ---
    computer_color: Color = Color.BLACK
    computer_top_moves: int = 3
    computer_rank_decay: float = 0.8
    computer_noise: float = 3.0

    @field_validator(
        "shrink_cycle",
        "respawn_interval",
        "power_up_interval",
        "power_up_lifetime",
        "shield_duration",
        "transformation_interval",
        "computer_top_moves",
    )
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError(f"Must be a positive number of turns, got {value}")
        return value

    @field_validator("respawn_weights", "transformation_weights")
    @classmethod
    def validate_weights(cls, value: dict[PieceType, int]) -> dict[PieceType, int]:
        if any(weight < 0 for weight in value.values()):
            raise ValueError("Weights cannot be negative")
        if sum(value.values()) <= 0:
            raise ValueError("At least one option needs a positive weight")
        return value

    @field_validator("respawn_weights")
    @classmethod
    def validate_no_king_respawn(
        cls, value: dict[PieceType, int]
    ) -> dict[PieceType, int]:
        if value.get(PieceType.KING, 0) != 0:
            raise ValueError("Kings never respawn")
        return value

    @field_validator("transformation_weights")
    @classmethod
    def validate_transformation_targets(
        cls, value: dict[PieceType, int]
    ) -> dict[PieceType, int]:
        if {PieceType.PAWN, PieceType.KING} & set(value):
            raise ValueError("Pawns can only transform into knight, bishop, rook or queen")
        return value

    @field_validator("computer_rank_decay")
    @classmethod
    def validate_decay(cls, value: float) -> float:
        if not 0 < value <= 1:
            raise ValueError(f"Rank decay must lie in (0, 1], got {value}")
        return value

    @model_validator(mode="after")
    def validate_shrink_lead(self) -> "EngineConfig":
        # new levels get scheduled at cycle position 1, a cycle of a single turn never gets there
        if self.shrink_cycle < 2:
            raise ValueError(f"shrink_cycle must be at least 2, got {self.shrink_cycle}")
        # the warning countdown is shrink_cycle - shrink_lead and must be at least one turn
        if not 0 <= self.shrink_lead < self.shrink_cycle:
            raise ValueError(
                f"shrink_lead ({self.shrink_lead}) must be smaller than shrink_cycle ({self.shrink_cycle})"
            )
        return self

    @property
    def shrink_countdown(self) -> int:
        return self.shrink_cycle - self.shrink_lead


DEFAULT_CONFIG = EngineConfig()

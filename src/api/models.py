"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GamePhase, Outcome, PowerUpType

SquareName = str  # algebraic notation, e.g. "e4"


def validate_square_name(value: str) -> str:
    def _is_algebraic_notation(value: str) -> bool:
        if len(value) != 2:
            return False

        file_character, rank_character = value[0], value[1]
        return file_character in "abcdefgh" and rank_character in "12345678"

    if not _is_algebraic_notation(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    human_color: Color = Color.WHITE
    seed: Optional[int] = None  # same seed + same moves = same game


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName
    teleport: bool = False  # spend an armed teleport on this move

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return validate_square_name(value)


class ComputerTurnRequest(BaseModel):
    game_id: UUID


class UsePowerUpRequest(BaseModel):
    game_id: UUID
    power_up: PowerUpType
    target: Optional[SquareName] = None  # piece to shield / square to trap

    @field_validator("target")
    @classmethod
    def validate_target(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return validate_square_name(value)


class ResetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class PowerUpView(BaseModel):
    type: PowerUpType
    square: SquareName
    turns_until_despawn: int


class ShrinkWarningView(BaseModel):
    square: SquareName
    turns_until_shrink: int


class GameResponse(BaseModel):
    game_id: UUID
    human_color: Color
    board_fen: str
    current_player: Color
    phase: GamePhase
    winner: Optional[Outcome]
    turn_count: int
    shrunk_squares: list[SquareName]
    power_ups: list[PowerUpView]
    held_power_ups: dict[Color, Optional[PowerUpType]]
    shrink_warnings: list[ShrinkWarningView]
    respawn_queue_length: int
    next_shrink_in: Optional[int]  # None once the board stopped shrinking
    next_respawn_in: int
    next_power_up_in: int
    last_move: Optional[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]  # e.g. "e2e4"
    teleport_moves: list[str]  # only while a teleport is armed

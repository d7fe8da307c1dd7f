from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from src.api.models import CreateGameRequest, MoveRequest, UsePowerUpRequest
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PowerUpType


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - CreateGameRequest --
def test_create_defaults() -> None:
    """Human plays white, no fixed seed."""
    request = CreateGameRequest()
    assert request.human_color == Color.WHITE
    assert request.seed is None


def test_create_with_seed() -> None:
    request = CreateGameRequest(human_color=Color.BLACK, seed=42)
    assert request.human_color == Color.BLACK
    assert request.seed == 42


def test_unknown_color() -> None:
    with pytest.raises(ValidationError):
        _ = CreateGameRequest(human_color="purple")


# -- Validation - MoveRequest --
def test_valid_square_names(mock_id: UUID) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    e2 = "e2"
    e4 = "e4"
    request = MoveRequest(game_id=mock_id, from_square=e2, to_square=e4)
    assert request.from_square == e2
    assert request.to_square == e4
    assert not request.teleport


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than two characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "i1",  # off the board: files a-h
        "a9",  # off the board: ranks 1-8
    ],
)
def test_invalid_from_square(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square=square, to_square="e2")


@pytest.mark.parametrize("square", ["nonsense", "11", "aa", "h0"])
def test_invalid_to_square(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square="e2", to_square=square)


# -- Validation - UsePowerUpRequest --
def test_target_is_optional(mock_id: UUID) -> None:
    """Extra move and teleport need no target, validator just returns None."""
    request = UsePowerUpRequest(game_id=mock_id, power_up=PowerUpType.EXTRA_MOVE)
    assert request.target is None


def test_valid_target(mock_id: UUID) -> None:
    request = UsePowerUpRequest(game_id=mock_id, power_up=PowerUpType.TRAP, target="d5")
    assert request.target == "d5"


def test_invalid_target(mock_id: UUID) -> None:
    with pytest.raises(InvalidRequestError):
        _ = UsePowerUpRequest(game_id=mock_id, power_up=PowerUpType.SHIELD, target="z9")

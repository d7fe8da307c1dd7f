"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable
from unittest.mock import Mock

import pytest

from src.royale.board import Board, default_identity
from src.royale.events import GameEvent
from src.royale.pieces import Piece
from src.royale.position import Position
from src.royale.randomness import RandomSource, make_rng
from src.royale.state import GameState

KINGS_ONLY_FEN = "4k3/8/8/8/8/8/8/4K3"  # black king e8, white king e1

StateBuilder = Callable[..., GameState]


@pytest.fixture
def rng() -> RandomSource:
    """Seeded random source: every test run sees the same 'random' decisions"""
    return make_rng(1234)


@pytest.fixture
def notify() -> Mock:
    """Records the events the engine sends"""
    return Mock()


@pytest.fixture
def state_from_fen() -> StateBuilder:
    """Call the inner function with a board placement (and any other GameState fields to override)"""

    def _create_state(fen: str = KINGS_ONLY_FEN, **changes) -> GameState:
        return GameState(board=Board.from_fen(fen), **changes)

    return _create_state


@pytest.fixture
def emitted(notify: Mock) -> Callable[[], list[GameEvent]]:
    """Call the inner function to get the events sent to the `notify` mock so far, in order"""

    def _emitted() -> list[GameEvent]:
        return [event_call.args[0] for event_call in notify.call_args_list]

    return _emitted


BoardBuilder = Callable[[dict[str, str]], Board]


@pytest.fixture
def board_with() -> BoardBuilder:
    """Call the inner function with {square name: FEN character}, e.g. {"e1": "K", "e8": "k"}"""

    def _create_board(pieces: dict[str, str]) -> Board:
        board = Board.empty()
        for square_name, character in pieces.items():
            square = Position.from_algebraic(square_name)
            board = board.place_piece(
                Piece.from_fen(character, default_identity(character, square)), square
            )
        return board

    return _create_board

"""Unit tests for /src/royale/computer.py"""

from typing import Callable

import pytest

from src.core.config import EngineConfig
from src.core.shared_types import Color, GamePhase, PowerUpType
from src.royale.computer import (
    MISSING_KING_PENALTY,
    is_mating_move,
    king_safety_score,
    power_up_proximity_score,
    score_move,
    select_computer_move,
    shrink_safety_score,
)
from src.royale.legal_moves import legal_moves
from src.royale.moves import build_move
from src.royale.position import Position
from src.royale.randomness import RandomSource, make_rng
from src.royale.state import GameState, PowerUp, ShrinkBlock, create_initial_game_state

StateBuilder = Callable[..., GameState]

NO_NOISE = EngineConfig(computer_noise=0.0)


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


def test_picks_a_legal_move(rng: RandomSource) -> None:
    state = create_initial_game_state().evolve(current_player=Color.BLACK)
    move = select_computer_move(state, rng)
    assert move is not None
    assert move.piece.color == Color.BLACK
    assert move in legal_moves(state, Color.BLACK)


def test_same_seed_same_move() -> None:
    state = create_initial_game_state()
    first = select_computer_move(state, make_rng(42), Color.WHITE)
    second = select_computer_move(state, make_rng(42), Color.WHITE)
    assert first == second


def test_always_takes_mate_in_one(state_from_fen: StateBuilder) -> None:
    state = state_from_fen(
        "4k3/8/8/8/8/8/r5PP/7K", current_player=Color.BLACK
    )
    for seed in range(5):
        move = select_computer_move(state, make_rng(seed))
        assert move is not None
        assert move.to_algebraic() == "a2a1"


def test_no_legal_move(state_from_fen: StateBuilder, rng: RandomSource) -> None:
    stalemated = state_from_fen("k7/2Q5/8/8/8/8/8/4K3", current_player=Color.BLACK)
    assert select_computer_move(stalemated, rng) is None


def test_game_over(rng: RandomSource) -> None:
    state = create_initial_game_state().evolve(game_phase=GamePhase.GAME_OVER)
    assert select_computer_move(state, rng, Color.WHITE) is None


# --- HEURISTICS ---
def test_capturing_a_free_queen_beats_a_quiet_move(
    state_from_fen: StateBuilder, rng: RandomSource
) -> None:
    state = state_from_fen("4k3/8/8/r2Q4/8/8/8/7K", current_player=Color.BLACK, config=NO_NOISE)
    capture = build_move(state.board, sq("a5"), sq("d5"))
    quiet = build_move(state.board, sq("a5"), sq("a6"))
    assert score_move(state, capture, Color.BLACK, rng) > score_move(
        state, quiet, Color.BLACK, rng
    )


def test_check_is_rewarded(state_from_fen: StateBuilder, rng: RandomSource) -> None:
    state = state_from_fen("4k3/8/8/8/7K/8/8/r7", current_player=Color.BLACK, config=NO_NOISE)
    checking = build_move(state.board, sq("a1"), sq("a4"))
    other = build_move(state.board, sq("a1"), sq("b1"))
    difference = score_move(state, checking, Color.BLACK, rng) - score_move(
        state, other, Color.BLACK, rng
    )
    assert difference == pytest.approx(500)


def test_king_prefers_the_centre(state_from_fen: StateBuilder) -> None:
    state = state_from_fen("8/8/8/8/8/8/1k6/7K")
    towards_centre = build_move(state.board, sq("b2"), sq("c3"))
    towards_edge = build_move(state.board, sq("b2"), sq("a1"))
    assert king_safety_score(state, towards_centre, Color.BLACK) == 20
    assert king_safety_score(state, towards_edge, Color.BLACK) == 0


def test_king_avoids_squares_about_to_vanish(state_from_fen: StateBuilder) -> None:
    state = state_from_fen(
        "8/8/8/8/8/8/1k6/7K", shrink_blocks=(ShrinkBlock(sq("c3"), 2),)
    )
    move = build_move(state.board, sq("b2"), sq("c3"))
    assert king_safety_score(state, move, Color.BLACK) == 20 - 100


def test_missing_king_penalty(state_from_fen: StateBuilder) -> None:
    state = state_from_fen("8/8/8/8/8/8/1r6/7K")
    move = build_move(state.board, sq("b2"), sq("b3"))
    assert king_safety_score(state, move, Color.BLACK) == MISSING_KING_PENALTY


def test_power_up_proximity(state_from_fen: StateBuilder) -> None:
    item = PowerUp("power-up-12-0", PowerUpType.SHIELD, sq("d4"), 5)
    state = state_from_fen("4k3/8/8/8/8/8/8/R3K3", power_ups=(item,))
    far_away = build_move(state.board, sq("a1"), sq("d1"))
    assert power_up_proximity_score(state, far_away) == 0
    state = state_from_fen("4k3/8/8/8/3R4/8/8/4K3", power_ups=(item,))
    near = build_move(state.board, sq("d4"), sq("d6"))
    assert power_up_proximity_score(state, near) == 10


def test_shrink_safety(state_from_fen: StateBuilder) -> None:
    state = state_from_fen(
        "4k3/8/8/8/8/8/8/R3K3",
        shrink_blocks=(
            ShrinkBlock(sq("a2"), 1),
            ShrinkBlock(sq("a3"), 3),
            ShrinkBlock(sq("a4"), 5),
            ShrinkBlock(sq("a5"), 7),
        ),
    )
    scores = [
        shrink_safety_score(state, build_move(state.board, sq("a1"), sq(name)))
        for name in ("a2", "a3", "a4", "a5", "a6")
    ]
    assert scores == [-200, -100, -50, -20, 0]


# --- MATE IN ONE ---
def test_no_mate_while_the_opponent_can_teleport_out(state_from_fen: StateBuilder) -> None:
    """A back rank mate on the board, but white can still teleport a piece in between"""
    teleport = PowerUp("power-up-12-1", PowerUpType.TELEPORT, sq("d4"), 6)
    state = state_from_fen(
        "r5k1/5ppp/8/8/8/8/5PPP/6K1",
        current_player=Color.BLACK,
        teleports={Color.WHITE: teleport},
    )
    back_rank = build_move(state.board, sq("a8"), sq("a1"))
    assert not is_mating_move(state, back_rank, Color.BLACK)
    assert is_mating_move(state.evolve(teleports={}), back_rank, Color.BLACK)


def test_shield_makes_the_mate(state_from_fen: StateBuilder) -> None:
    """The bishop could take the checking rook, unless the rook is shielded"""
    state = state_from_fen("7k/6pp/8/8/8/5b2/8/R5K1", config=NO_NOISE)
    rook = state.board.piece(sq("a1"))
    assert rook is not None
    back_rank = build_move(state.board, sq("a1"), sq("a8"))
    assert not is_mating_move(state, back_rank, Color.WHITE)

    shielded = state.evolve(shielded_pieces={rook.identity: 2})
    assert is_mating_move(shielded, back_rank, Color.WHITE)
    for seed in range(3):
        move = select_computer_move(shielded, make_rng(seed), Color.WHITE)
        assert move is not None
        assert move.to_algebraic() == "a1a8"

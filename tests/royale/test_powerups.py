"""Unit tests for /src/royale/powerups.py"""

from typing import Callable

import pytest

from src.core.shared_types import Color, PieceType, PowerUpType
from src.royale.board import Board
from src.royale.events import GameEvent
from src.royale.pieces import Piece
from src.royale.position import ALL_POSITIONS, Position
from src.royale.powerups import (
    POWER_UP_EFFECTS,
    collect_power_up,
    description,
    is_spawn_turn,
    safe_power_up_squares,
    spawn_power_ups,
    teleport_moves,
    turns_until_next_spawn,
    update_power_ups,
    update_shields,
    use_power_up,
)
from src.royale.randomness import RandomSource
from src.royale.state import GameState, PowerUp

StateBuilder = Callable[..., GameState]
Emitted = Callable[[], list[GameEvent]]


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


def power_up(power_up_type: PowerUpType, square: str = "d4", turns: int = 6) -> PowerUp:
    return PowerUp(f"power-up-{square}", power_up_type, sq(square), turns)


def holding(state: GameState, color: Color, item: PowerUp) -> GameState:
    return state.evolve(player_power_ups={**state.player_power_ups, color: item})


def test_every_type_has_an_effect_and_a_description() -> None:
    assert set(POWER_UP_EFFECTS) == set(PowerUpType)
    assert all(description(power_up_type) for power_up_type in PowerUpType)


# --- SPAWNING ---
@pytest.mark.parametrize(
    "turn_count, expected", [(0, False), (11, False), (12, True), (24, True), (25, False)]
)
def test_is_spawn_turn(state_from_fen: StateBuilder, turn_count: int, expected: bool) -> None:
    assert is_spawn_turn(state_from_fen(turn_count=turn_count)) == expected


def test_safe_squares_keep_away_from_kings(state_from_fen: StateBuilder) -> None:
    state = state_from_fen(shrunk_squares=frozenset({"3-3"}))
    squares = safe_power_up_squares(state)
    # 64 - 1 shrunk - 6 around the e8 king (on the edge) - 6 around the e1 king
    assert len(squares) == 51
    assert sq("e2") not in squares
    assert sq("d7") not in squares
    assert sq("e4") in squares


def test_spawn_one_per_color(
    state_from_fen: StateBuilder, rng: RandomSource, notify, emitted: Emitted
) -> None:
    state = state_from_fen(turn_count=12)
    after = spawn_power_ups(state, rng, notify)
    assert len(after.power_ups) == 2
    assert len({item.identity for item in after.power_ups}) == 2
    assert len({item.position for item in after.power_ups}) == 2
    for item in after.power_ups:
        assert item.turns_until_despawn == 6
        assert item.position in safe_power_up_squares(state)
    assert emitted() == [GameEvent.POWER_UP_SPAWNED, GameEvent.POWER_UP_SPAWNED]


def test_spawn_only_for_colors_on_the_board(
    board_with, rng: RandomSource
) -> None:
    state = GameState(board=board_with({"e1": "K"}), turn_count=12)
    assert len(spawn_power_ups(state, rng).power_ups) == 1


def test_no_spawn_off_cadence(state_from_fen: StateBuilder, rng: RandomSource) -> None:
    state = state_from_fen(turn_count=13)
    assert spawn_power_ups(state, rng) is state


def test_spawn_on_full_board_is_a_no_op(rng: RandomSource) -> None:
    position = {
        square: Piece(PieceType.PAWN, Color.BLACK, f"pawn-{square.key}")
        for square in ALL_POSITIONS
    }
    state = GameState(board=Board(position), turn_count=12)
    assert spawn_power_ups(state, rng) == state


# --- DESPAWNING ---
def test_update_power_ups(state_from_fen: StateBuilder) -> None:
    state = state_from_fen(
        power_ups=(power_up(PowerUpType.SHIELD, "d4", 1), power_up(PowerUpType.TRAP, "d5", 3))
    )
    after = update_power_ups(state)
    assert len(after.power_ups) == 1
    assert after.power_ups[0].position == sq("d5")
    assert after.power_ups[0].turns_until_despawn == 2


def test_update_shields(state_from_fen: StateBuilder) -> None:
    state = state_from_fen(shielded_pieces={"a": 1, "b": 3})
    assert dict(update_shields(state).shielded_pieces) == {"b": 2}


@pytest.mark.parametrize("turn_count, expected", [(0, 12), (5, 7), (12, 12), (23, 1)])
def test_turns_until_next_spawn(
    state_from_fen: StateBuilder, turn_count: int, expected: int
) -> None:
    assert turns_until_next_spawn(state_from_fen(turn_count=turn_count)) == expected


# --- COLLECTING ---
def test_collect(state_from_fen: StateBuilder, notify, emitted: Emitted) -> None:
    item = power_up(PowerUpType.TRAP)
    state = state_from_fen(power_ups=(item,))
    after = collect_power_up(state, sq("d4"), Color.WHITE, notify)
    assert after.held_power_up(Color.WHITE) == item
    assert after.held_power_up(Color.BLACK) is None
    assert after.power_ups == ()
    assert emitted() == [GameEvent.POWER_UP_COLLECTED]


def test_one_power_up_at_a_time(state_from_fen: StateBuilder) -> None:
    """Already holding one: the new one stays on the board"""
    held = power_up(PowerUpType.SHIELD, "a3")
    item = power_up(PowerUpType.TRAP)
    state = holding(state_from_fen(power_ups=(item,)), Color.WHITE, held)
    after = collect_power_up(state, sq("d4"), Color.WHITE)
    assert after is state
    assert after.held_power_up(Color.WHITE) == held


def test_nothing_to_collect(state_from_fen: StateBuilder) -> None:
    state = state_from_fen()
    assert collect_power_up(state, sq("d4"), Color.WHITE) is state


# --- USING ---
def test_use_shield(state_from_fen: StateBuilder, notify, emitted: Emitted) -> None:
    state = holding(state_from_fen(), Color.WHITE, power_up(PowerUpType.SHIELD))
    after = use_power_up(state, Color.WHITE, PowerUpType.SHIELD, sq("e1"), notify)
    king = state.board.piece(sq("e1"))
    assert king is not None
    assert dict(after.shielded_pieces) == {king.identity: 3}
    assert after.held_power_up(Color.WHITE) is None
    assert emitted() == [GameEvent.POWER_UP_USED]


@pytest.mark.parametrize("target", [None, "e8", "d4"])
def test_shield_needs_own_piece(state_from_fen: StateBuilder, target: str | None) -> None:
    state = holding(state_from_fen(), Color.WHITE, power_up(PowerUpType.SHIELD))
    target_square = sq(target) if target else None
    assert use_power_up(state, Color.WHITE, PowerUpType.SHIELD, target_square) is state


def test_use_trap(state_from_fen: StateBuilder) -> None:
    state = holding(state_from_fen(), Color.WHITE, power_up(PowerUpType.TRAP))
    after = use_power_up(state, Color.WHITE, PowerUpType.TRAP, sq("e5"))
    assert dict(after.trap_squares) == {sq("e5").key: Color.WHITE}
    assert after.held_power_up(Color.WHITE) is None


@pytest.mark.parametrize("target", [None, "e1", "a8"])
def test_trap_needs_free_square(state_from_fen: StateBuilder, target: str | None) -> None:
    state = holding(
        state_from_fen(shrunk_squares=frozenset({sq("a8").key})),
        Color.WHITE,
        power_up(PowerUpType.TRAP),
    )
    target_square = sq(target) if target else None
    assert use_power_up(state, Color.WHITE, PowerUpType.TRAP, target_square) is state


def test_use_extra_move(state_from_fen: StateBuilder) -> None:
    state = holding(state_from_fen(), Color.WHITE, power_up(PowerUpType.EXTRA_MOVE))
    after = use_power_up(state, Color.WHITE, PowerUpType.EXTRA_MOVE)
    assert after.extra_moves == frozenset({Color.WHITE})


def test_use_teleport(state_from_fen: StateBuilder) -> None:
    item = power_up(PowerUpType.TELEPORT)
    state = holding(state_from_fen(), Color.WHITE, item)
    after = use_power_up(state, Color.WHITE, PowerUpType.TELEPORT)
    assert dict(after.teleports) == {Color.WHITE: item}

    moves = teleport_moves(after, Color.WHITE)
    assert moves
    assert all(move.used_power_up == item for move in moves)
    assert all(after.board.is_empty(move.to_square) for move in moves)
    # the king may not teleport next to the enemy king
    assert sq("e7") not in {move.to_square for move in moves}


def test_no_teleport_moves_unless_armed(state_from_fen: StateBuilder) -> None:
    assert teleport_moves(state_from_fen(), Color.WHITE) == []


def test_use_requires_matching_power_up(state_from_fen: StateBuilder) -> None:
    state = holding(state_from_fen(), Color.WHITE, power_up(PowerUpType.SHIELD))
    assert use_power_up(state, Color.WHITE, PowerUpType.TRAP, sq("e5")) is state
    assert use_power_up(state_from_fen(), Color.WHITE, PowerUpType.EXTRA_MOVE) is state


def test_use_only_on_own_turn(state_from_fen: StateBuilder) -> None:
    state = holding(
        state_from_fen(current_player=Color.BLACK), Color.WHITE, power_up(PowerUpType.EXTRA_MOVE)
    )
    assert use_power_up(state, Color.WHITE, PowerUpType.EXTRA_MOVE) is state

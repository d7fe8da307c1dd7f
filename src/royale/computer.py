"""
Computer player
----

No search tree: every legal move gets a score from a handful of weighted heuristics and one of the best few
moves is picked at random (better moves are more likely). A move that checkmates right away is always played.

The computer only reads the state. The move it picks goes through the game reducer like any other move.
"""

import logging
from typing import Optional

from src.core.shared_types import Color, GamePhase, Outcome, PieceType
from src.royale.game import apply_move, evaluate_game_over
from src.royale.legal_moves import legal_moves
from src.royale.moves import Move
from src.royale.position import Position
from src.royale.randomness import RandomSource, weighted_choice
from src.royale.rules import is_legal_move
from src.royale.state import GameState

logger = logging.getLogger(__name__)

# --- HEURISTIC WEIGHTS ---
CHECK_BONUS = 500
CAPTURE_MULTIPLIER = 15
REMOVE_KING_ATTACKER_BONUS = 200
MISSING_KING_PENALTY = -1000
KING_EDGE_DISTANCE_MULTIPLIER = 10
KING_INTO_SHRINK_PENALTY = -100
KING_SHRINK_DANGER_TURNS = 5
GUARD_KING_BONUS = 15
GUARD_KING_DISTANCE = 2
CENTER_BONUS = 10
ATTACKED_SQUARE_MULTIPLIER = 8
POWER_UP_WEIGHT = 0.5
POWER_UP_COLLECT_BONUS = 50
POWER_UP_NEARBY_BONUS = 20
POWER_UP_NEARBY_DISTANCE = 2
MATERIAL_MULTIPLIER = 2

CENTER_SQUARES = frozenset(
    {Position(3, 3), Position(3, 4), Position(4, 3), Position(4, 4)}
)

# (turns left, penalty): the closer a warned square is to vanishing, the worse it is to move there
SHRINK_WARNING_PENALTIES: tuple[tuple[int, int], ...] = (
    (1, -200),
    (3, -100),
    (5, -50),
)
SHRINK_WARNING_DEFAULT_PENALTY = -20


def king_safety_score(state: GameState, move: Move, color: Color) -> float:
    """
    * King moves: stay away from the edges (those vanish first), do not step onto a square about to vanish
    * Other moves: stay close to the king to protect it
    """
    king_square = state.board.locate_king(color)
    if king_square is None:
        return MISSING_KING_PENALTY

    score = 0
    if move.piece.type == PieceType.KING:
        score += move.to_square.edge_distance() * KING_EDGE_DISTANCE_MULTIPLIER
        block = state.shrink_block_at(move.to_square)
        if block is not None and block.turns_until_shrink <= KING_SHRINK_DANGER_TURNS:
            score += KING_INTO_SHRINK_PENALTY
    elif move.to_square.manhattan_distance(king_square) <= GUARD_KING_DISTANCE:
        score += GUARD_KING_BONUS
    return score


def power_up_proximity_score(state: GameState, move: Move) -> float:
    score = 0.0
    for power_up in state.power_ups:
        distance = move.to_square.manhattan_distance(power_up.position)
        if distance == 0:
            score += POWER_UP_COLLECT_BONUS
        elif distance <= POWER_UP_NEARBY_DISTANCE:
            score += POWER_UP_NEARBY_BONUS / distance
    return score


def shrink_safety_score(state: GameState, move: Move) -> float:
    block = state.shrink_block_at(move.to_square)
    if block is None:
        return 0
    for turns_left, penalty in SHRINK_WARNING_PENALTIES:
        if block.turns_until_shrink <= turns_left:
            return penalty
    return SHRINK_WARNING_DEFAULT_PENALTY


def capture_score(state: GameState, move: Move, color: Color) -> float:
    """Material won, plus a bonus for taking out a piece that was attacking our king"""
    if move.captured is None:
        return 0

    score = move.captured.value * CAPTURE_MULTIPLIER
    board, shrunk = state.board, state.shrunk_squares
    king_square = board.locate_king(color)
    if (
        king_square is not None
        and board.is_square_attacked(king_square, color.opponent, shrunk)
        and is_legal_move(board, move.to_square, king_square, shrunk)
    ):
        score += REMOVE_KING_ATTACKER_BONUS
    return score


def is_mating_move(state: GameState, move: Move, color: Color) -> bool:
    """
    Does the move end the game in our favour, with the same rules the reducer applies?
    The opponent's armed teleport can still get out of a mate on the board, a shield can make one.
    """
    after_move = evaluate_game_over(apply_move(state, move))
    return after_move.game_phase == GamePhase.GAME_OVER and after_move.winner == Outcome(
        color.value
    )


def score_move(state: GameState, move: Move, color: Color, rng: RandomSource) -> float:
    """Sum of all heuristics for a single move, plus a little noise for variety"""
    shrunk = state.shrunk_squares
    board_after_move = state.board.move_piece(move)

    score: float = 0
    if board_after_move.is_check(color.opponent, shrunk):
        score += CHECK_BONUS
    score += capture_score(state, move, color)
    score += king_safety_score(state, move, color)
    if move.to_square in CENTER_SQUARES:
        score += CENTER_BONUS
    if board_after_move.is_square_attacked(move.to_square, color.opponent, shrunk):
        score -= move.piece.value * ATTACKED_SQUARE_MULTIPLIER
    score += power_up_proximity_score(state, move) * POWER_UP_WEIGHT
    score += shrink_safety_score(state, move)
    score += board_after_move.evaluate(color) * MATERIAL_MULTIPLIER
    score += rng.random() * state.config.computer_noise
    return score


def select_computer_move(
    state: GameState, rng: RandomSource, color: Optional[Color] = None
) -> Optional[Move]:
    """
    Pick a move for the computer (by default the color configured for it).
    ---

    1. no legal moves (or game over)? -> None. The caller passes the turn.
    2. a move that wins the game on the spot (checkmate)? -> play it.
    3. otherwise score every move and draw one of the top moves, each next rank being
       `computer_rank_decay` times as likely as the one before.
    """
    color = color if color is not None else state.config.computer_color
    if not state.is_playing:
        return None

    moves = legal_moves(state, color)
    if not moves:
        logger.info("No legal move for the %s computer player", color)
        return None

    for move in moves:
        if is_mating_move(state, move, color):
            return move

    scored_moves = [(score_move(state, move, color, rng), move) for move in moves]
    # stable sort: equal scores keep move generation order
    scored_moves.sort(key=lambda scored: scored[0], reverse=True)

    config = state.config
    top_moves = scored_moves[: config.computer_top_moves]
    weights = {rank: config.computer_rank_decay**rank for rank in range(len(top_moves))}
    _, chosen = top_moves[weighted_choice(rng, weights)]
    return chosen

"""
Veteran pawns
----

Every piece counts the turns it has been standing still. Every `transformation_interval` turns, one of the
pawns of each color that stood still for at least `transformation_threshold` turns is promoted to a
random stronger piece (knight most likely, queen rarest). Never more than one pawn per color per tick.
"""

from src.core.shared_types import Color, PieceType
from src.royale.events import GameEvent, Notifier, emit, no_op
from src.royale.pieces import Piece
from src.royale.position import Position
from src.royale.randomness import RandomSource, choose, weighted_choice
from src.royale.state import GameState


def age_pieces(state: GameState) -> GameState:
    """
    One more completed tick for every piece on the board.
    The move resets the piece that just moved to 0, so it leaves this tick at 1: the counter counts the ticks
    since the piece last moved, including the tick of the move itself.
    """
    return state.evolve(board=state.board.map_pieces(Piece.aged))


def eligible_pawns(state: GameState, color: Color) -> list[Position]:
    threshold = state.config.transformation_threshold
    return [
        square
        for square, piece in state.board.items()
        if piece.color == color
        and piece.type == PieceType.PAWN
        and piece.turns_without_moving >= threshold
    ]


def is_transformation_turn(state: GameState) -> bool:
    return (
        state.turn_count > 0
        and state.turn_count % state.config.transformation_interval == 0
    )


def process_transformations(
    state: GameState, rng: RandomSource, notify: Notifier = no_op
) -> GameState:
    if not is_transformation_turn(state):
        return state

    board = state.board
    for color in (Color.WHITE, Color.BLACK):
        square = choose(rng, eligible_pawns(state, color))
        if square is None:
            continue

        pawn = board.piece(square)
        assert pawn is not None
        new_type = weighted_choice(rng, state.config.transformation_weights)
        board = board.place_piece(pawn.transformed_into(new_type), square)
        emit(notify, GameEvent.PIECE_TRANSFORMED)

    return state.evolve(board=board)

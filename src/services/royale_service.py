"""Orchestration of communication from API models to the game engine and the game store (and the reverse direction)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    ComputerTurnRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PowerUpView,
    ResetGameRequest,
    ShrinkWarningView,
    UsePowerUpRequest,
)
from src.core.config import DEFAULT_CONFIG, EngineConfig
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    InvalidRequestError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameRecord
from src.core.shared_types import Color
from src.db.repository import GameRepository
from src.royale.computer import select_computer_move
from src.royale.events import Notifier, no_op
from src.royale.game import (
    create_initial_game_state,
    legal_moves,
    pass_turn,
    play_turn,
    use_power_up,
)
from src.royale.moves import Move, build_move
from src.royale.position import Position
from src.royale.powerups import turns_until_next_spawn
from src.royale.randomness import make_rng
from src.royale.respawn import turns_until_next_respawn
from src.royale.shrink import turns_until_next_shrink
from src.royale.state import GameState

logger = logging.getLogger(__name__)


class RoyaleService:
    """Orchestration of layers for a battle royale chess game: one human against the computer."""

    def __init__(
        self,
        repository: GameRepository,
        notify: Notifier = no_op,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.repo = repository
        self.notify = notify
        self.config = config if config is not None else DEFAULT_CONFIG

    # -- API routes logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game. The computer plays the other color."""
        record = self._new_record(request.human_color, request.seed)
        stored_record, game_id = self.repo.create_game(record)
        logger.info("Created game %s, human plays %s", game_id, request.human_color)
        return self._create_game_response(game_id, stored_record)

    def get_game(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to redraw the board, the warnings and the countdowns.
        """
        record = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, record)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves of the human player (empty while it is the computer's turn or once the game is over)."""
        record = self._fetch_game(request.game_id)
        state = record.state

        moves: list[Move] = []
        if state.is_playing and state.current_player == record.human_color:
            moves = legal_moves(state, record.human_color)

        return LegalMovesResponse(
            game_id=request.game_id,
            color=record.human_color,
            legal_moves=[move.to_algebraic() for move in moves if move.used_power_up is None],
            teleport_moves=[
                move.to_algebraic() for move in moves if move.used_power_up is not None
            ],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Human move attempt, followed by the clock ticking once."""
        record = self._fetch_game(request.game_id)
        state = record.state
        self._ensure_turn(state, record.human_color)

        move = self._build_requested_move(
            state,
            record.human_color,
            Position.from_algebraic(request.from_square),
            Position.from_algebraic(request.to_square),
            request.teleport,
        )
        after_turn = play_turn(state, move, record.rng, self.notify)
        if after_turn is state:
            raise IllegalMoveError(f"Illegal move: {move.to_algebraic()}")

        return self._store(request.game_id, record.with_state(after_turn))

    def play_computer_turn(self, request: ComputerTurnRequest) -> GameResponse:
        """Let the computer play its move. If it has none, the turn passes back to the human."""
        record = self._fetch_game(request.game_id)
        state = record.state
        self._ensure_turn(state, record.computer_color)

        move = select_computer_move(state, record.rng, record.computer_color)
        if move is None:
            after_turn = pass_turn(state, self.notify)
        else:
            after_turn = play_turn(state, move, record.rng, self.notify)
            if after_turn is state:
                raise GameStateError(
                    f"Engine rejected the computer's move {move.to_algebraic()}"
                )

        return self._store(request.game_id, record.with_state(after_turn))

    def use_power_up(self, request: UsePowerUpRequest) -> GameResponse:
        """Human spends the held power-up. Does not count as a move."""
        record = self._fetch_game(request.game_id)
        state = record.state
        self._ensure_turn(state, record.human_color)

        held = state.held_power_up(record.human_color)
        if held is None or held.type != request.power_up:
            raise GameStateError(f"No {request.power_up} power-up to use.")

        target = Position.from_algebraic(request.target) if request.target else None
        after_use = use_power_up(
            state, record.human_color, request.power_up, target, self.notify
        )
        if after_use is state:
            raise InvalidRequestError(
                f"Cannot use {request.power_up} on target {request.target!r}."
            )

        return self._store(request.game_id, record.with_state(after_use))

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        """Start over: same id, same sides, same seed."""
        record = self._fetch_game(request.game_id)
        fresh_record = self._new_record(record.human_color, record.seed)
        return self._store(request.game_id, fresh_record)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _new_record(self, human_color: Color, seed: Optional[int]) -> GameRecord:
        config = self.config.model_copy(update={"computer_color": human_color.opponent})
        return GameRecord(
            state=create_initial_game_state(config),
            rng=make_rng(seed),
            human_color=human_color,
            seed=seed,
        )

    def _ensure_turn(self, state: GameState, color: Color) -> None:
        if not state.is_playing:
            raise GameStateError(f"Game is over. Winner: {state.winner}")
        if state.current_player != color:
            raise NotYourTurnError(f"It is {state.current_player}'s turn, not {color}'s.")

    def _build_requested_move(
        self,
        state: GameState,
        color: Color,
        from_square: Position,
        to_square: Position,
        teleport: bool,
    ) -> Move:
        """Turn the two squares of the request into a move the engine can validate"""
        piece = state.board.piece(from_square)
        if piece is None or piece.color != color:
            raise IllegalMoveError(
                f"No {color} piece on {from_square.to_algebraic()} to move."
            )

        if not teleport:
            return build_move(state.board, from_square, to_square)

        armed = state.teleports.get(color)
        if armed is None:
            raise IllegalMoveError("No teleport armed. Use a teleport power-up first.")
        return Move(from_square, to_square, piece, used_power_up=armed)

    def _store(self, game_id: UUID, record: GameRecord) -> GameResponse:
        if self.repo.update_game(game_id, record) is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return self._create_game_response(game_id, record)

    def _create_game_response(self, game_id: UUID, record: GameRecord) -> GameResponse:
        """Convert the GameState of a stored game to a GameResponse."""
        state = record.state
        return GameResponse(
            game_id=game_id,
            human_color=record.human_color,
            board_fen=state.board.to_fen(),
            current_player=state.current_player,
            phase=state.game_phase,
            winner=state.winner,
            turn_count=state.turn_count,
            shrunk_squares=sorted(
                Position.from_key(key).to_algebraic() for key in state.shrunk_squares
            ),
            power_ups=[
                PowerUpView(
                    type=power_up.type,
                    square=power_up.position.to_algebraic(),
                    turns_until_despawn=power_up.turns_until_despawn,
                )
                for power_up in state.power_ups
            ],
            held_power_ups={
                color: (power_up.type if power_up is not None else None)
                for color, power_up in state.player_power_ups.items()
            },
            shrink_warnings=[
                ShrinkWarningView(
                    square=block.position.to_algebraic(),
                    turns_until_shrink=block.turns_until_shrink,
                )
                for block in state.shrink_blocks
            ],
            respawn_queue_length=len(state.respawn_queue),
            next_shrink_in=turns_until_next_shrink(state),
            next_respawn_in=turns_until_next_respawn(state),
            next_power_up_in=turns_until_next_spawn(state),
            last_move=state.last_move.to_algebraic() if state.last_move else None,
        )

    def _fetch_game(self, game_id: UUID) -> GameRecord:
        """Attempt to find the game in the repository and raise error if it fails."""
        record = self.repo.get_game(game_id)
        if record is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return record

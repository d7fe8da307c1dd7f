"""
Notifications sent to whoever is listening (sound effects, UI banners).

The engine fires and forgets: a listener can never block a state transition or change its outcome.
"""

import logging
from enum import StrEnum
from typing import Callable

logger = logging.getLogger(__name__)


class GameEvent(StrEnum):
    SHRINK_WARNING = "shrink_warning"
    SHRINK_IMMINENT = "shrink_imminent"
    BOARD_SHRUNK = "board_shrunk"
    KING_TELEPORTED = "king_teleported"
    KING_EMERGENCY = "king_emergency"
    PIECE_ELIMINATED = "piece_eliminated"
    PIECE_RESPAWNED = "piece_respawned"
    RESPAWN_DEFERRED = "respawn_deferred"
    POWER_UP_SPAWNED = "power_up_spawned"
    POWER_UP_COLLECTED = "power_up_collected"
    POWER_UP_USED = "power_up_used"
    TRAP_TRIGGERED = "trap_triggered"
    PIECE_TRANSFORMED = "piece_transformed"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    TURN_PASSED = "turn_passed"


Notifier = Callable[[GameEvent], None]


def no_op(event: GameEvent) -> None:
    """Default sink: nobody is listening"""


def emit(notify: Notifier, event: GameEvent) -> None:
    try:
        notify(event)
    except Exception:
        logger.exception("Listener failed on event %s, ignoring it", event)

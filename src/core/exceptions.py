"""
Custom exceptions.

The engine in src/royale never raises while a game is being played (bad input returns the state unchanged).
These are raised at the boundaries: the service layer, request validation and the test/setup helpers.
"""


class GameError(Exception):
    """Top-level exception for everything that can go wrong around a game"""


class GameStateError(GameError):
    """Requested action does not fit the current state of the game (e.g. game is over)"""


class IllegalMoveError(GameError):
    """The engine refused the move"""


class NotYourTurnError(GameError):
    """Player tried to act while it is the opponent's turn"""


class InvalidFENError(GameError):
    """Board placement string could not be parsed"""


class InvalidRequestError(GameError):
    """Request data that cannot be interpreted (raised straight through pydantic validation)"""


class RepositoryError(GameError):
    """Game could not be found / stored"""

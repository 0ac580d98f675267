"""
Custom errors shared by every layer.

Illegal moves inside the rule engines are NOT exceptions (they are rejected silently by returning None).
These errors are for situations the caller has to know about.
"""


class GameError(Exception):
    """Base class for all errors raised by this project."""


class GameStateError(GameError):
    """The requested action does not fit the current state of the game (ex. the game already ended)."""


class IllegalMoveError(GameError):
    """A move was attempted that the rules do not allow."""


class OccupiedPointError(IllegalMoveError):
    """Go: a stone was placed on a point that already holds a stone."""


class OutOfBoundsError(GameError):
    """A coordinate outside of the board was used to access a cell."""


class NotYourTurnError(GameError):
    """The side that attempted the move is not the side to move."""


class RepositoryError(GameError):
    """Something went wrong storing or retrieving a session."""


class SessionNotFoundError(RepositoryError):
    """No session is registered under the requested id."""


class InvalidRequestError(GameError):
    """Request payload could not be interpreted."""

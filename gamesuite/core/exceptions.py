"""
Custom errors raised by the domain / service layers.

The session controller turns the domain errors into silent no-ops (a casual game does not shout at the player),
the service layer lets the request related errors bubble up to its caller.
"""


class GameError(Exception):
    """Base class for everything that can go wrong while playing a game"""


class InvalidMoveError(GameError):
    """Destination not reachable for the piece, or the piece does not belong to the side to move."""


class NoPieceSelectedError(GameError):
    """A destination click arrived while nothing was selected."""


class GameStateError(GameError):
    """The game is in a state that does not accept the request (ex. it already ended)."""


class InvalidFENError(GameError):
    """Could not parse the placement part of a FEN string."""


class InvalidRequestError(GameError):
    """Data coming in over the boundary did not pass validation."""


class SessionNotFoundError(GameError):
    """No session registered under the requested id."""

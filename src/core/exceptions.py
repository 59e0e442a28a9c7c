"""
Custom exceptions
---

All derive from GameError, so a caller can catch any problem caused by this application in one go.
"""


class GameError(Exception):
    """Top-level exception of this application"""


class IllegalMoveError(GameError):
    """The requested move is not among the legal moves of the selected piece."""


class GameStateError(GameError):
    """The operation is not allowed in the current state of the game (game over, waiting for a promotion choice, ...)"""


class InvalidPromotionError(GameError):
    """A pawn can only be promoted into a queen, rook, bishop or knight."""


class InvalidFENError(GameError):
    """String could not be interpreted as a FEN position"""


class InvalidRequestError(GameError):
    """Request data (at the boundary) could not be interpreted"""


class RepositoryError(GameError):
    """Could not find / store a game"""

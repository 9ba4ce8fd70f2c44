"""Exceptions raised by the game engine and the session layer."""


class ArenaError(Exception):
    """Base class for every error raised by ttt_arena."""


class IllegalMoveError(ArenaError, ValueError):
    """A mark was placed on an occupied or out-of-range cell."""


class NoLegalMovesError(ArenaError, ValueError):
    """A move was requested for a board with no empty cell."""


class InvalidDifficultyError(ArenaError, ValueError):
    pass


class InvalidBoardError(ArenaError, ValueError):
    """Board text could not be parsed into 9 cells."""


class GameOverError(ArenaError):
    pass


class NotYourTurnError(ArenaError):
    """Human input arrived while the automated side is to move."""

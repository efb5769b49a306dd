"""
Exception types for the cubesweeper rules engine.
"""


class CubesweeperError(Exception):
    """Base class for all cubesweeper errors."""


class ConfigurationError(CubesweeperError, ValueError):
    """Raised when a difficulty, ratio or trigger layout is invalid."""


class InvalidStateError(CubesweeperError, RuntimeError):
    """Raised when a round operation is called in the wrong phase."""

"""Exceptions raised for programmer errors and malformed input.

Rule violations are never raised; they come back as ``ErrorKind`` values.
"""


class AmalgamError(Exception):
    """Base class for engine errors."""


class CoordinateError(AmalgamError, ValueError):
    """A coordinate outside the board topology was passed in."""

    def __init__(self, coordinate, message: str = None):
        self.coordinate = coordinate
        super().__init__(message or f"Coordinate {coordinate} is not on the board")


class TopologyError(AmalgamError):
    """Board data could not be turned into a consistent topology."""


class ConfigError(AmalgamError, ValueError):
    """A configuration value is out of range."""

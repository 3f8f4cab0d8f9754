"""
Navigation errors.

Queries that find nothing return None or an empty collection. Exceptions
are reserved for malformed input that must never reach the map.
"""


class NavigationError(Exception):
    """Base class for all gridnav errors."""


class InvariantViolation(NavigationError, ValueError):
    """Raised when a value would break a map or planner invariant."""


class InvalidCoordinateError(InvariantViolation):
    """Raised for coordinates with NaN components."""


class ConfigError(NavigationError, ValueError):
    """Raised for invalid configuration values or files."""


class MapFormatError(NavigationError, ValueError):
    """Raised when a persisted map cannot be read back."""

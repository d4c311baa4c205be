"""Custom exceptions for the hex map core."""


class HexMapError(Exception):
    """Base exception for hex map errors."""

    pass


class UnknownDirectionError(HexMapError, ValueError):
    """Raised for a direction value that is not one of the six hex edges.

    The direction set is closed, so this signals a programming error.
    """

    pass


class ConfigError(HexMapError):
    """Raised when a map configuration references undefined keys."""

    pass

"""
Error hierarchy for the statement library.

Building and inspecting statements never raises: incomplete input simply
produces a statement whose is_valid() is False. These errors cover the
edges where the library talks to the outside world.
"""


class XAPIError(Exception):
    """Base exception for xapi errors."""
    pass


class SerializationError(XAPIError):
    """Raised when a value cannot be rendered as JSON-compatible data."""
    pass


class ConfigurationError(XAPIError, ValueError):
    """Raised when an environment setting has an unusable value."""
    pass

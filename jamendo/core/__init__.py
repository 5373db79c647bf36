"""Core definitions shared across the Jamendo client."""

from .exceptions import (
    JamendoError,
    ConfigurationError,
    JamendoNetworkError,
    JamendoAPIError,
)

__all__ = [
    "JamendoError",
    "ConfigurationError",
    "JamendoNetworkError",
    "JamendoAPIError",
]

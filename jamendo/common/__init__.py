"""Common utilities and shared components for the Jamendo client."""

from .config import (
    JamendoConfig,
    HTTPConfig,
    RetryConfig,
    LoggingConfig,
    FileLoggingConfig,
)
from .logging_config import setup_logging
from .http_client import AsyncHTTPClient

__all__ = [
    "JamendoConfig",
    "HTTPConfig",
    "RetryConfig",
    "LoggingConfig",
    "FileLoggingConfig",
    "setup_logging",
    "AsyncHTTPClient",
]

"""Exceptions raised by the Jamendo client."""

from typing import Optional


class JamendoError(Exception):
    """Base exception for Jamendo client errors."""

    pass


class ConfigurationError(JamendoError):
    """Raised when a required setting (client id, secret, token) is missing."""

    pass


class JamendoNetworkError(JamendoError):
    """Raised when a request fails at the transport level after all retries."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class JamendoAPIError(JamendoError):
    """Raised when the API answers with an error.

    ``code`` is the API error code from the response headers when present,
    otherwise the HTTP status code.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
        path: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.path = path

    def __str__(self) -> str:
        if self.code is not None:
            return f"[{self.code}] {self.message}"
        return self.message

"""Response models and parsers for the Jamendo API."""

from .models import JamendoResponse, OAuthToken, ResponseHeaders
from .response_parser import ResponseParser

__all__ = [
    "JamendoResponse",
    "OAuthToken",
    "ResponseHeaders",
    "ResponseParser",
]

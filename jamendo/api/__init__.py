"""API interaction layer for the Jamendo client.

This package contains the Jamendo client, its OAuth helper and the
request parameter normalization rules.
"""

from .client import JamendoClient
from .oauth import JamendoOAuth
from .params import encode_date_range, normalize_parameters

__all__ = [
    "JamendoClient",
    "JamendoOAuth",
    "encode_date_range",
    "normalize_parameters",
]

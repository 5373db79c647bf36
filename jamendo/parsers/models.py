"""Pydantic models for Jamendo API responses."""

import time
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ResponseHeaders(BaseModel):
    """The ``headers`` block every read/write endpoint returns."""

    status: str = Field(description="'success' or 'failed'")
    code: int = Field(default=0, description="API status code (0 on success)")
    error_message: str = Field(default="", description="Error description on failure")
    warnings: str = Field(default="", description="Non-fatal warnings")
    results_count: int = Field(default=0, description="Number of results on this page")
    results_fullcount: Optional[int] = Field(
        default=None, description="Total result count (only with fullcount=true)"
    )
    next: Optional[str] = Field(default=None, description="URL of the next page")

    model_config = {
        "extra": "ignore",
        "validate_assignment": True,
    }


class JamendoResponse(BaseModel):
    """Response envelope: typed headers, pass-through results."""

    headers: ResponseHeaders = Field(description="Response status headers")
    results: List[Any] = Field(
        default_factory=list, description="Raw result records"
    )

    model_config = {
        "extra": "ignore",
        "validate_assignment": True,
    }


class OAuthToken(BaseModel):
    """Token returned by the ``/oauth/grant`` endpoint."""

    access_token: str = Field(description="Bearer token for write requests")
    refresh_token: Optional[str] = Field(default=None, description="Refresh token")
    expires_in: Optional[int] = Field(default=None, description="Lifetime in seconds")
    token_type: Optional[str] = Field(default=None, description="Token type")
    scope: Optional[str] = Field(default=None, description="Granted scope")
    obtained_at: float = Field(
        default_factory=time.time, description="Unix time the token was obtained"
    )

    model_config = {
        "extra": "ignore",
    }

    @property
    def expires_at(self) -> Optional[float]:
        """Unix time of expiry, or None when the API gave no lifetime."""
        if self.expires_in is None:
            return None
        return self.obtained_at + self.expires_in

    def is_expired(self, margin: float = 60.0) -> bool:
        """
        Check whether the token has expired (or will within ``margin`` seconds).

        Tokens without a lifetime never expire locally.
        """
        expires_at = self.expires_at
        if expires_at is None:
            return False
        return time.time() >= expires_at - margin

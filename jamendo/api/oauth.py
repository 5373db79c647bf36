"""Jamendo OAuth 2.0 authorization code flow and token management."""

import secrets
from typing import TYPE_CHECKING, Dict, Optional
from urllib.parse import urlencode

import structlog

from ..core.exceptions import ConfigurationError
from ..parsers.models import OAuthToken
from ..parsers.response_parser import ResponseParser

if TYPE_CHECKING:
    from .client import JamendoClient

logger = structlog.get_logger(__name__)


class JamendoOAuth:
    """
    OAuth 2.0 helper for user-authorized (write) requests.

    The flow has three steps:

    1. Send the user to :meth:`authorize_url`. Jamendo redirects back to
       ``redirect_uri`` with ``code`` and ``state`` query parameters.
    2. Exchange the code with :meth:`grant`. The token is kept in memory.
    3. Make write requests; :meth:`get_access_token` refreshes the token
       transparently when it is about to expire.

    Tokens are never written to disk.

    Example:
        >>> async with JamendoClient(config) as client:
        ...     url = client.oauth.authorize_url("https://example.com/callback")
        ...     # ... user authorizes, callback receives ?code=...
        ...     await client.oauth.grant(code, "https://example.com/callback")
        ...     await client.set_favorite({"track_id": 245})
    """

    AUTHORIZE_PATH = "/oauth/authorize"
    GRANT_PATH = "/oauth/grant"
    DEFAULT_SCOPE = "music"
    REFRESH_MARGIN = 60.0

    def __init__(self, client: "JamendoClient"):
        self.client = client
        self.token: Optional[OAuthToken] = None
        self.last_state: Optional[str] = None

    @property
    def config(self):
        return self.client.jamendo_config

    def authorize_url(
        self,
        redirect_uri: str,
        scope: str = DEFAULT_SCOPE,
        state: Optional[str] = None,
    ) -> str:
        """
        Build the URL the user must visit to authorize the application.

        No request is made. When ``state`` is not given a random one is
        generated; it is kept in ``last_state`` so the callback can be
        checked against it.

        Args:
            redirect_uri: Callback URL registered for the application
            scope: Requested scope
            state: Opaque CSRF token echoed back on the callback

        Returns:
            Absolute authorization URL

        Raises:
            ConfigurationError: If redirect_uri is empty
        """
        if not redirect_uri or not redirect_uri.strip():
            raise ConfigurationError("redirect_uri is required to build the authorize URL")

        if state is None:
            state = secrets.token_urlsafe(16)
        self.last_state = state

        params = {
            "client_id": self.config.client_id,
            "redirect_uri": redirect_uri,
            "scope": scope,
            "state": state,
        }
        return f"{self.config.api_url}{self.AUTHORIZE_PATH}?{urlencode(params)}"

    def _require_secret(self) -> str:
        if not self.config.client_secret:
            raise ConfigurationError(
                "client_secret is required for the OAuth grant "
                "(config file or JAMENDO_CLIENT_SECRET)"
            )
        return self.config.client_secret

    async def _request_token(self, form: Dict[str, str]) -> OAuthToken:
        data = await self.client.call("POST", self.GRANT_PATH, data=form)
        self.token = ResponseParser.parse_token(data, self.GRANT_PATH)
        logger.info(
            "oauth_token_granted",
            grant_type=form["grant_type"],
            expires_in=self.token.expires_in,
            scope=self.token.scope,
            has_refresh_token=self.token.refresh_token is not None,
        )
        return self.token

    async def grant(self, code: str, redirect_uri: str) -> OAuthToken:
        """
        Exchange an authorization code for an access token.

        Args:
            code: Code received on the redirect callback
            redirect_uri: The same redirect URI used for authorization

        Returns:
            The granted OAuthToken (also stored on this helper)

        Raises:
            ConfigurationError: If no client secret is configured
            JamendoAPIError: If the API rejects the code
            JamendoNetworkError: On transport failure
        """
        client_secret = self._require_secret()
        logger.info("oauth_grant_requested", redirect_uri=redirect_uri)
        return await self._request_token(
            {
                "client_id": self.config.client_id,
                "client_secret": client_secret,
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
            }
        )

    async def refresh(self, refresh_token: Optional[str] = None) -> OAuthToken:
        """
        Obtain a new access token from a refresh token.

        Args:
            refresh_token: Token to use (defaults to the stored one)

        Returns:
            The new OAuthToken

        Raises:
            ConfigurationError: If no client secret or refresh token is available
            JamendoAPIError: If the API rejects the refresh token
        """
        client_secret = self._require_secret()
        if refresh_token is None and self.token is not None:
            refresh_token = self.token.refresh_token
        if not refresh_token:
            raise ConfigurationError("No refresh token available; run the grant flow first")

        logger.info("oauth_refresh_requested")
        return await self._request_token(
            {
                "client_id": self.config.client_id,
                "client_secret": client_secret,
                "grant_type": "refresh_token",
                "refresh_token": refresh_token,
            }
        )

    def set_token(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[int] = None,
    ) -> OAuthToken:
        """Install a token obtained elsewhere (e.g. restored by the caller)."""
        self.token = OAuthToken(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=expires_in,
        )
        return self.token

    async def get_access_token(self) -> str:
        """
        Get a usable access token, refreshing it if it is about to expire.

        Returns:
            Access token string

        Raises:
            ConfigurationError: If no token has been granted, or it expired
                and cannot be refreshed
        """
        if self.token is None:
            raise ConfigurationError(
                "Write requests need an access token; run the OAuth grant flow first"
            )

        if self.token.is_expired(self.REFRESH_MARGIN):
            if not self.token.refresh_token:
                raise ConfigurationError("Access token expired and no refresh token is available")
            logger.debug("oauth_token_expiring", expires_at=self.token.expires_at)
            await self.refresh()

        return self.token.access_token

    def clear(self) -> None:
        """Forget the current token and state."""
        self.token = None
        self.last_state = None
        logger.info("oauth_token_cleared")

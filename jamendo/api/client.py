"""Jamendo API v3.0 client."""

from typing import Any, AsyncIterator, Dict, Mapping, Optional, Tuple

import httpx
import structlog

from .oauth import JamendoOAuth
from .params import normalize_parameters
from ..common.config import JamendoConfig
from ..common.http_client import AsyncHTTPClient
from ..core.exceptions import JamendoNetworkError
from ..parsers.models import JamendoResponse, OAuthToken
from ..parsers.response_parser import ResponseParser

logger = structlog.get_logger(__name__)

Parameters = Optional[Mapping[str, Any]]


class JamendoClient(AsyncHTTPClient):
    """
    Client for the Jamendo music catalog API.

    Every call sends the application ``client_id`` and ``format=json``.
    Parameters are normalized before sending: lists become ``+``-separated
    values, dates become ``YYYY-MM-DD``, and ``datebetween`` /
    ``durationbetween`` accept a ``(start, end)`` pair. Responses are
    returned as decoded JSON, unchanged.

    Errors:
    - JamendoNetworkError: transport failure (after retries, if enabled)
    - JamendoAPIError: the API reported a failure (``headers.status == "failed"``,
      an OAuth error, or an HTTP error status)

    Example:
        >>> import asyncio
        >>> from jamendo import JamendoClient, JamendoConfig
        >>>
        >>> async def main():
        ...     config = JamendoConfig(client_id="your_client_id")
        ...     async with JamendoClient(config) as client:
        ...         data = await client.tracks({"id": 245})
        ...         print(data["results"][0]["name"])
        ...
        ...         data = await client.albums(
        ...             {"artist_name": "Both", "datebetween": ("2005-01-01", "2010-12-31")}
        ...         )
        >>>
        >>> asyncio.run(main())
    """

    MAX_PAGE_SIZE = 200

    def __init__(self, config: JamendoConfig):
        """
        Initialize the Jamendo client.

        Args:
            config: JamendoConfig with credentials, API location and retry flag
        """
        super().__init__(config.effective_http_config(), base_url=config.api_url)
        self.jamendo_config = config
        self.client_id = config.client_id
        self.oauth = JamendoOAuth(self)
        self.logger = logger.bind(component="jamendo_client")

        self.logger.info(
            "jamendo_client_initialized",
            base_url=self.base_url,
            retry=config.retry,
            has_client_secret=config.client_secret is not None,
        )

    @classmethod
    def from_config(cls, config: Optional[JamendoConfig] = None) -> "JamendoClient":
        """
        Create a client, reading the configuration from the environment if omitted.

        Raises:
            ConfigurationError: If no client id is available
        """
        return cls(config or JamendoConfig.from_env())

    async def call(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """
        Send a request and decode the JSON body.

        GET requests go through the retry policy, other methods are sent
        once. Network failures that survive it become
        JamendoNetworkError; error statuses and non-JSON bodies become
        JamendoAPIError.

        Args:
            method: HTTP method
            path: Endpoint path relative to the API root
            **kwargs: Arguments for httpx (params, data, ...)

        Returns:
            Decoded JSON object
        """
        try:
            response = await self.request(method, path, **kwargs)
        except httpx.HTTPStatusError as e:
            # retryable status still failing on the last attempt
            response = e.response
        except httpx.RequestError as e:
            self.logger.error(
                "jamendo_network_error",
                method=method,
                path=path,
                error=type(e).__name__,
            )
            raise JamendoNetworkError(f"{method} {path} failed: {e}", path=path) from e

        return ResponseParser.decode(response, path)

    async def _fetch_envelope(
        self, path: str, parameters: Parameters
    ) -> Tuple[Dict[str, Any], JamendoResponse]:
        params = normalize_parameters(parameters, self.client_id)
        self.logger.debug(
            "jamendo_request",
            path=path,
            parameters=sorted(key for key in params if key != "client_id"),
        )
        data = await self.call("GET", path, params=params)
        envelope = ResponseParser.parse_response(data, path)
        if envelope.headers.warnings:
            self.logger.warning("jamendo_api_warning", path=path, warnings=envelope.headers.warnings)
        self.logger.debug(
            "jamendo_response",
            path=path,
            results_count=envelope.headers.results_count,
        )
        return data, envelope

    async def fetch(self, path: str, parameters: Parameters = None) -> Dict[str, Any]:
        """
        GET any read endpoint.

        Args:
            path: Endpoint path, e.g. ``"/tracks"``
            parameters: Query parameters (normalized before sending)

        Returns:
            Decoded response (``headers`` and ``results``)

        Raises:
            JamendoAPIError: If the API reports a failure
            JamendoNetworkError: On transport failure
        """
        data, _ = await self._fetch_envelope(path, parameters)
        return data

    async def paginate(
        self,
        path: str,
        parameters: Parameters = None,
        page_size: int = MAX_PAGE_SIZE,
        max_items: Optional[int] = None,
    ) -> AsyncIterator[Any]:
        """
        Iterate over every result of a read endpoint, one page at a time.

        Pages are requested sequentially using ``limit``/``offset``, starting
        at the caller's ``offset`` if given. Iteration stops on a short or
        empty page, or after ``max_items`` results.

        Args:
            path: Endpoint path
            parameters: Query parameters (``limit`` is overridden)
            page_size: Results per request (1-200)
            max_items: Stop after this many results (0 yields nothing)

        Yields:
            Raw result records

        Example:
            >>> async for track in client.paginate("/tracks", {"tags": ["rock"]}, max_items=500):
            ...     print(track["name"])
        """
        if not 1 <= page_size <= self.MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {self.MAX_PAGE_SIZE}")
        if max_items is not None and max_items < 0:
            raise ValueError("max_items must not be negative")
        if max_items == 0:
            return

        params: Dict[str, Any] = dict(parameters or {})
        offset = int(params.pop("offset", None) or 0)
        yielded = 0

        while True:
            params.update(limit=page_size, offset=offset)
            _, envelope = await self._fetch_envelope(path, params)
            results = envelope.results

            for item in results:
                yield item
                yielded += 1
                if max_items is not None and yielded >= max_items:
                    return

            if len(results) < page_size:
                break
            offset += len(results)

            self.logger.debug("jamendo_pagination", path=path, offset=offset, fetched=yielded)

        self.logger.info("jamendo_pagination_complete", path=path, total=yielded)

    async def write(
        self,
        path: str,
        parameters: Parameters = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        POST a user action on behalf of an authorized user.

        The form body carries the normalized parameters, ``client_id`` and
        ``access_token``.

        Args:
            path: Write endpoint path, e.g. ``"/setuser/favorite"``
            parameters: Action parameters
            access_token: Token to use; defaults to the OAuth helper's token,
                refreshed if it is about to expire

        Returns:
            Decoded response

        Raises:
            ConfigurationError: If no access token is available
            JamendoAPIError: If the API rejects the action
            JamendoNetworkError: On transport failure
        """
        token = access_token or await self.oauth.get_access_token()
        form = normalize_parameters(parameters, self.client_id)
        form["access_token"] = token

        self.logger.info("jamendo_write", path=path)
        data = await self.call("POST", path, data=form)
        ResponseParser.raise_for_error_body(data, path)
        return data

    # OAuth delegation

    def authorize_url(
        self,
        redirect_uri: str,
        scope: str = JamendoOAuth.DEFAULT_SCOPE,
        state: Optional[str] = None,
    ) -> str:
        """Build the OAuth authorization URL (see JamendoOAuth.authorize_url)."""
        return self.oauth.authorize_url(redirect_uri, scope=scope, state=state)

    async def grant(self, code: str, redirect_uri: str) -> OAuthToken:
        """Exchange an authorization code for a token (see JamendoOAuth.grant)."""
        return await self.oauth.grant(code, redirect_uri)

    async def refresh(self, refresh_token: Optional[str] = None) -> OAuthToken:
        """Refresh the access token (see JamendoOAuth.refresh)."""
        return await self.oauth.refresh(refresh_token)

    # Albums

    async def albums(self, parameters: Parameters = None) -> Dict[str, Any]:
        """
        Search and list albums.

        Common parameters: ``id``, ``name``, ``artist_id``, ``artist_name``,
        ``datebetween``, ``order``, ``limit``, ``offset``.

        Example:
            >>> data = await client.albums({"id": 33})
            >>> data["results"][0]["name"]
            'Simple Exercice'
        """
        return await self.fetch("/albums", parameters)

    async def album_tracks(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List albums with their tracks."""
        return await self.fetch("/albums/tracks", parameters)

    async def album_musicinfo(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Get album tags."""
        return await self.fetch("/albums/musicinfo", parameters)

    # Artists

    async def artists(self, parameters: Parameters = None) -> Dict[str, Any]:
        """
        Search and list artists.

        Example:
            >>> data = await client.artists({"id": 5})
            >>> data["results"][0]["name"]
            'Both'
        """
        return await self.fetch("/artists", parameters)

    async def artist_albums(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List artists with their albums."""
        return await self.fetch("/artists/albums", parameters)

    async def artist_tracks(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List artists with their tracks."""
        return await self.fetch("/artists/tracks", parameters)

    async def artist_musicinfo(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Get artist tags and descriptions."""
        return await self.fetch("/artists/musicinfo", parameters)

    async def artist_locations(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Get artist locations."""
        return await self.fetch("/artists/locations", parameters)

    # Tracks

    async def tracks(self, parameters: Parameters = None) -> Dict[str, Any]:
        """
        Search and list tracks.

        Supports free text ``search``, ``tags`` / ``fuzzytags`` (lists are
        joined), ``include`` (e.g. ``["musicinfo", "stats"]``),
        ``audioformat`` and ``durationbetween``.

        Example:
            >>> data = await client.tracks({"id": 245})
            >>> data["results"][0]["album_name"]
            'Simple Exercice'
        """
        return await self.fetch("/tracks", parameters)

    async def similar_tracks(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Get tracks similar to a given track."""
        return await self.fetch("/tracks/similar", parameters)

    # Playlists

    async def playlists(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Search and list playlists."""
        return await self.fetch("/playlists", parameters)

    async def playlist_tracks(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List playlists with their tracks."""
        return await self.fetch("/playlists/tracks", parameters)

    # Users

    async def users(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Get user profiles."""
        return await self.fetch("/users", parameters)

    async def user_albums(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List albums in users' libraries."""
        return await self.fetch("/users/albums", parameters)

    async def user_artists(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List artists users are fans of."""
        return await self.fetch("/users/artists", parameters)

    async def user_tracks(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List tracks users liked or favorited."""
        return await self.fetch("/users/tracks", parameters)

    # Misc

    async def autocomplete(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Complete a prefix (``prefix``, ``entity``)."""
        return await self.fetch("/autocomplete", parameters)

    async def feeds(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Get Jamendo news feeds."""
        return await self.fetch("/feeds", parameters)

    async def radios(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List Jamendo radios."""
        return await self.fetch("/radios", parameters)

    async def radio_stream(self, parameters: Parameters = None) -> Dict[str, Any]:
        """Get a radio's stream URL and now-playing info."""
        return await self.fetch("/radios/stream", parameters)

    async def reviews(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List reviews."""
        return await self.fetch("/reviews", parameters)

    async def review_albums(self, parameters: Parameters = None) -> Dict[str, Any]:
        """List albums with their reviews."""
        return await self.fetch("/reviews/albums", parameters)

    # User actions (OAuth)

    async def set_fan(
        self, parameters: Parameters = None, access_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """Become a fan of an artist (``artist_id``)."""
        return await self.write("/setuser/fan", parameters, access_token)

    async def set_favorite(
        self, parameters: Parameters = None, access_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """Add a track to the user's favorites (``track_id``)."""
        return await self.write("/setuser/favorite", parameters, access_token)

    async def set_like(
        self, parameters: Parameters = None, access_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """Like a track (``track_id``)."""
        return await self.write("/setuser/like", parameters, access_token)

    async def set_myalbum(
        self, parameters: Parameters = None, access_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """Add an album to the user's library (``album_id``)."""
        return await self.write("/setuser/myalbum", parameters, access_token)

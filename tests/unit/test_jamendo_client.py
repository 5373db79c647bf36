"""Tests for the JamendoClient class."""

from datetime import date
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from jamendo.api.client import JamendoClient
from jamendo.core.exceptions import (
    ConfigurationError,
    JamendoAPIError,
    JamendoNetworkError,
)

API_URL = "https://api.jamendo.com/v3.0"

READ_ENDPOINTS = [
    ("albums", "/albums"),
    ("album_tracks", "/albums/tracks"),
    ("album_musicinfo", "/albums/musicinfo"),
    ("artists", "/artists"),
    ("artist_albums", "/artists/albums"),
    ("artist_tracks", "/artists/tracks"),
    ("artist_musicinfo", "/artists/musicinfo"),
    ("artist_locations", "/artists/locations"),
    ("tracks", "/tracks"),
    ("similar_tracks", "/tracks/similar"),
    ("playlists", "/playlists"),
    ("playlist_tracks", "/playlists/tracks"),
    ("users", "/users"),
    ("user_albums", "/users/albums"),
    ("user_artists", "/users/artists"),
    ("user_tracks", "/users/tracks"),
    ("autocomplete", "/autocomplete"),
    ("feeds", "/feeds"),
    ("radios", "/radios"),
    ("radio_stream", "/radios/stream"),
    ("reviews", "/reviews"),
    ("review_albums", "/reviews/albums"),
]

WRITE_ENDPOINTS = [
    ("set_fan", "/setuser/fan"),
    ("set_favorite", "/setuser/favorite"),
    ("set_like", "/setuser/like"),
    ("set_myalbum", "/setuser/myalbum"),
]


class TestJamendoClient:
    """Test suite for JamendoClient."""

    def test_from_config_uses_environment(self, monkeypatch):
        """Test from_config falls back to environment variables."""
        monkeypatch.setenv("JAMENDO_CLIENT_ID", "env-id")
        client = JamendoClient.from_config()
        assert client.client_id == "env-id"
        assert client.base_url == API_URL

    def test_from_config_without_client_id(self):
        """Test a client cannot be built without a client id."""
        with pytest.raises(ConfigurationError):
            JamendoClient.from_config()

    def test_retry_flag_controls_attempts(self, jamendo_config, no_retry_config):
        """Test the retry flag maps onto the HTTP retry policy."""
        assert JamendoClient(jamendo_config).config.retry.max_attempts == 3
        assert JamendoClient(no_retry_config).config.retry.max_attempts == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_tracks(self, jamendo_config, make_envelope, track_245):
        """Test fetching track #245 returns the body unchanged."""
        body = make_envelope([track_245])
        route = respx.get(f"{API_URL}/tracks").mock(return_value=httpx.Response(200, json=body))

        async with JamendoClient(jamendo_config) as client:
            data = await client.tracks({"id": 245})

        assert data == body
        assert data["results"][0]["artist_name"] == "Both"
        assert data["results"][0]["album_name"] == "Simple Exercice"

        params = route.calls.last.request.url.params
        assert params["id"] == "245"
        assert params["client_id"] == "83039c0d"
        assert params["format"] == "json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_parameters_are_normalized(self, jamendo_config, make_envelope):
        """Test lists, booleans and date ranges are encoded in the query."""
        route = respx.get(f"{API_URL}/albums").mock(
            return_value=httpx.Response(200, json=make_envelope())
        )
        request_params = {
            "id": [33, 34],
            "fullcount": True,
            "datebetween": (date(2005, 1, 1), date(2010, 12, 31)),
            "name": None,
        }

        async with JamendoClient(jamendo_config) as client:
            await client.albums(request_params)

        params = route.calls.last.request.url.params
        assert params["id"] == "33 34"
        assert params["fullcount"] == "true"
        assert params["datebetween"] == "2005-01-01_2010-12-31"
        assert "name" not in params
        assert request_params["id"] == [33, 34]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method_name,path", READ_ENDPOINTS)
    async def test_read_endpoint_paths(self, jamendo_config, make_envelope, method_name, path):
        """Test every read endpoint GETs its documented path."""
        with respx.mock:
            route = respx.get(f"{API_URL}{path}").mock(
                return_value=httpx.Response(200, json=make_envelope())
            )

            async with JamendoClient(jamendo_config) as client:
                await getattr(client, method_name)({"limit": 1})

            assert route.call_count == 1
            assert route.calls.last.request.method == "GET"

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_custom_path(self, jamendo_config, make_envelope):
        """Test fetch reaches endpoints without a dedicated method."""
        route = respx.get(f"{API_URL}/tracks/file").mock(
            return_value=httpx.Response(200, json=make_envelope())
        )

        async with JamendoClient(jamendo_config) as client:
            await client.fetch("/tracks/file", {"id": 245})

        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_failed_envelope_raises_api_error(self, jamendo_config, make_envelope):
        """Test an API failure reported in a 200 response raises JamendoAPIError."""
        respx.get(f"{API_URL}/tracks").mock(
            return_value=httpx.Response(
                200,
                json=make_envelope(status="failed", code=5, error_message="Invalid parameter"),
            )
        )

        async with JamendoClient(jamendo_config) as client:
            with pytest.raises(JamendoAPIError) as exc_info:
                await client.tracks({"bogus": 1})

        assert exc_info.value.code == 5
        assert exc_info.value.path == "/tracks"

    @pytest.mark.asyncio
    @respx.mock
    async def test_retry_on_network_error(self, jamendo_config, make_envelope):
        """Test transient network failures are retried when the flag is on."""
        route = respx.get(f"{API_URL}/artists").mock(
            side_effect=[
                httpx.ConnectError("reset"),
                httpx.Response(200, json=make_envelope([{"id": "5", "name": "Both"}])),
            ]
        )

        async with JamendoClient(jamendo_config) as client:
            data = await client.artists({"id": 5})

        assert data["results"][0]["name"] == "Both"
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_retry_when_disabled(self, no_retry_config):
        """Test the first network failure is final when the flag is off."""
        route = respx.get(f"{API_URL}/artists").mock(side_effect=httpx.ConnectError("reset"))

        async with JamendoClient(no_retry_config) as client:
            with pytest.raises(JamendoNetworkError) as exc_info:
                await client.artists({"id": 5})

        assert route.call_count == 1
        assert exc_info.value.path == "/artists"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    @respx.mock
    async def test_persistent_server_error(self, jamendo_config):
        """Test a 5xx that survives all retries becomes an API error."""
        route = respx.get(f"{API_URL}/albums").mock(return_value=httpx.Response(503))

        async with JamendoClient(jamendo_config) as client:
            with pytest.raises(JamendoAPIError) as exc_info:
                await client.albums()

        assert exc_info.value.status_code == 503
        assert route.call_count == 3


class TestPagination:
    """Tests for JamendoClient.paginate."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_follows_offset_until_short_page(self, jamendo_config, make_envelope):
        """Test pages are requested until one comes back short."""
        route = respx.get(f"{API_URL}/tracks").mock(
            side_effect=[
                httpx.Response(200, json=make_envelope([{"id": "1"}, {"id": "2"}])),
                httpx.Response(200, json=make_envelope([{"id": "3"}, {"id": "4"}])),
                httpx.Response(200, json=make_envelope([{"id": "5"}])),
            ]
        )

        async with JamendoClient(jamendo_config) as client:
            ids = [t["id"] async for t in client.paginate("/tracks", {"tags": "rock"}, page_size=2)]

        assert ids == ["1", "2", "3", "4", "5"]
        offsets = [call.request.url.params["offset"] for call in route.calls]
        assert offsets == ["0", "2", "4"]
        assert all(call.request.url.params["limit"] == "2" for call in route.calls)
        assert all(call.request.url.params["tags"] == "rock" for call in route.calls)

    @pytest.mark.asyncio
    @respx.mock
    async def test_max_items(self, jamendo_config, make_envelope):
        """Test iteration stops once max_items results were yielded."""
        route = respx.get(f"{API_URL}/albums").mock(
            return_value=httpx.Response(
                200, json=make_envelope([{"id": str(i)} for i in range(3)])
            )
        )

        async with JamendoClient(jamendo_config) as client:
            items = [a async for a in client.paginate("/albums", page_size=3, max_items=4)]

        assert len(items) == 4
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_zero_max_items(self, jamendo_config):
        """Test max_items=0 yields nothing and sends no request."""
        with respx.mock(assert_all_called=False):
            route = respx.get(f"{API_URL}/albums")

            async with JamendoClient(jamendo_config) as client:
                items = [a async for a in client.paginate("/albums", page_size=2, max_items=0)]

            assert items == []
            assert not route.called

    @pytest.mark.asyncio
    async def test_negative_max_items(self, jamendo_config):
        """Test a negative max_items is rejected."""
        async with JamendoClient(jamendo_config) as client:
            with pytest.raises(ValueError, match="max_items"):
                async for _ in client.paginate("/albums", max_items=-1):
                    pass

    @pytest.mark.asyncio
    @respx.mock
    async def test_starts_at_caller_offset(self, jamendo_config, make_envelope):
        """Test a caller supplied offset is the first page's offset."""
        route = respx.get(f"{API_URL}/albums").mock(
            return_value=httpx.Response(200, json=make_envelope())
        )

        async with JamendoClient(jamendo_config) as client:
            items = [a async for a in client.paginate("/albums", {"offset": 40})]

        assert items == []
        assert route.calls.last.request.url.params["offset"] == "40"
        assert route.calls.last.request.url.params["limit"] == "200"

    @pytest.mark.asyncio
    async def test_invalid_page_size(self, jamendo_config):
        """Test page sizes outside the API range are rejected."""
        async with JamendoClient(jamendo_config) as client:
            with pytest.raises(ValueError):
                async for _ in client.paginate("/tracks", page_size=500):
                    pass


class TestWrites:
    """Tests for user-action writes."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method_name,path", WRITE_ENDPOINTS)
    async def test_write_endpoints(self, jamendo_config, make_envelope, method_name, path):
        """Test every write endpoint POSTs a form with the access token."""
        with respx.mock:
            route = respx.post(f"{API_URL}{path}").mock(
                return_value=httpx.Response(200, json=make_envelope())
            )

            async with JamendoClient(jamendo_config) as client:
                await getattr(client, method_name)({"track_id": 245}, access_token="tok")

            request = route.calls.last.request
            form = parse_qs(request.content.decode())
            assert request.method == "POST"
            assert form["access_token"] == ["tok"]
            assert form["client_id"] == ["83039c0d"]
            assert form["track_id"] == ["245"]

    @pytest.mark.asyncio
    async def test_write_without_token(self, jamendo_config):
        """Test a write without any token fails before sending."""
        async with JamendoClient(jamendo_config) as client:
            with pytest.raises(ConfigurationError, match="access token"):
                await client.set_favorite({"track_id": 245})

    @pytest.mark.asyncio
    @respx.mock
    async def test_write_uses_granted_token(self, jamendo_config, make_envelope):
        """Test writes default to the OAuth helper's token."""
        route = respx.post(f"{API_URL}/setuser/fan").mock(
            return_value=httpx.Response(200, json=make_envelope())
        )

        async with JamendoClient(jamendo_config) as client:
            client.oauth.set_token("stored-token", expires_in=3600)
            await client.set_fan({"artist_id": 5})

        form = parse_qs(route.calls.last.request.content.decode())
        assert form["access_token"] == ["stored-token"]
        assert form["artist_id"] == ["5"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_write_rejected(self, jamendo_config, make_envelope):
        """Test a rejected write raises JamendoAPIError."""
        respx.post(f"{API_URL}/setuser/like").mock(
            return_value=httpx.Response(
                200, json=make_envelope(status="failed", code=7, error_message="Invalid token")
            )
        )

        async with JamendoClient(jamendo_config) as client:
            with pytest.raises(JamendoAPIError, match="Invalid token"):
                await client.set_like({"track_id": 245}, access_token="bad")

    @pytest.mark.asyncio
    @respx.mock
    async def test_write_sent_once_on_timeout(self, jamendo_config):
        """Test a write that times out is not posted again."""
        route = respx.post(f"{API_URL}/setuser/favorite").mock(
            side_effect=httpx.ReadTimeout("slow")
        )

        async with JamendoClient(jamendo_config) as client:
            with pytest.raises(JamendoNetworkError):
                await client.set_favorite({"track_id": 245}, access_token="tok")

        assert route.call_count == 1

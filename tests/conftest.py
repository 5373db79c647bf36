"""Shared pytest fixtures for all tests."""

from typing import Any, Callable, Dict, List

import pytest

from jamendo.common.config import HTTPConfig, JamendoConfig, LoggingConfig, RetryConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real JAMENDO_* variables from leaking into tests."""
    for name in ("JAMENDO_CLIENT_ID", "JAMENDO_CLIENT_SECRET", "JAMENDO_API_VERSION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fast_retry_config() -> RetryConfig:
    """Provide a retry configuration that does not sleep between attempts."""
    return RetryConfig(
        max_attempts=3,
        backoff_multiplier=0.1,
        min_wait=0.0,
        max_wait=0.0,
        status_codes=[429, 500, 502, 503, 504],
    )


@pytest.fixture
def http_config(fast_retry_config: RetryConfig) -> HTTPConfig:
    """Provide HTTP config with test-friendly retry settings."""
    return HTTPConfig(timeout=5, retry=fast_retry_config)


@pytest.fixture
def jamendo_config(http_config: HTTPConfig) -> JamendoConfig:
    """Provide a Jamendo configuration with credentials."""
    return JamendoConfig(
        client_id="83039c0d",
        client_secret="s3cr3t",
        http=http_config,
        logging=LoggingConfig(level="DEBUG", format="text"),
    )


@pytest.fixture
def make_envelope() -> Callable[..., Dict[str, Any]]:
    """Provide a factory for API response envelopes."""

    def _make(results: List[Any] = None, **headers: Any) -> Dict[str, Any]:
        results = results if results is not None else []
        envelope_headers = {
            "status": "success",
            "code": 0,
            "error_message": "",
            "warnings": "",
            "results_count": len(results),
        }
        envelope_headers.update(headers)
        return {"headers": envelope_headers, "results": results}

    return _make



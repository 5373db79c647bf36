"""Async HTTP client with automatic retry logic using httpx and tenacity."""

from typing import Any, Optional

import httpx
import structlog
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    retry_if_exception,
    RetryCallState,
)

from .config import HTTPConfig

logger = structlog.get_logger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

RETRYABLE_NETWORK_EXCEPTIONS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


class AsyncHTTPClient:
    """
    Async HTTP client with connection pooling and automatic retry logic.

    This client provides a context manager interface for making HTTP requests
    with automatic retries on transient failures (network errors and the
    status codes listed in ``config.retry.status_codes``). It uses exponential
    backoff with configurable parameters. Setting ``retry.max_attempts`` to 1
    disables retries entirely. Non-idempotent methods (POST, ...) are always
    sent once.

    Example:
        >>> import asyncio
        >>> from jamendo.common.config import HTTPConfig
        >>>
        >>> async def main():
        ...     async with AsyncHTTPClient(HTTPConfig()) as client:
        ...         response = await client.request("GET", "https://api.jamendo.com/v3.0/tracks")
        ...         print(response.json())
        >>>
        >>> asyncio.run(main())
    """

    def __init__(self, config: HTTPConfig, base_url: str = ""):
        """
        Initialize the async HTTP client.

        Args:
            config: HTTPConfig object with client settings
            base_url: Base URL for all requests (optional)
        """
        self.config = config
        self.base_url = base_url
        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logger.bind(component="http_client")

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Enter async context manager."""
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )

        headers = {}
        if self.config.user_agent:
            headers["User-Agent"] = self.config.user_agent

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(float(self.config.timeout)),
            limits=limits,
            headers=headers,
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            verify=self.config.verify_ssl,
        )

        self.logger.info(
            "http_client_initialized",
            base_url=self.base_url,
            timeout=self.config.timeout,
            max_attempts=self.config.retry.max_attempts,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self.logger.info("http_client_closed")

    def _should_retry_status(self, response: httpx.Response) -> bool:
        """Check whether a status code is configured as retryable."""
        return response.status_code in self.config.retry.status_codes

    def _log_retry_attempt(self, retry_state: RetryCallState) -> None:
        """
        Log retry attempts with structured logging.

        Args:
            retry_state: Tenacity retry state object
        """
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        self.logger.warning(
            "http_retry_attempt",
            attempt=retry_state.attempt_number,
            seconds_since_start=round(retry_state.seconds_since_start, 2),
            error=type(exception).__name__ if exception else None,
        )

    async def _make_request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Request URL
            **kwargs: Additional arguments to pass to httpx

        Returns:
            httpx.Response object. Non-retryable error statuses are returned
            as-is for the caller to inspect.

        Raises:
            httpx.HTTPStatusError: When a retryable status persists after the last attempt
            httpx.RequestError: After exhausting retries for network errors
            RuntimeError: If used outside the async context manager
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with context manager.")

        max_attempts = self.config.retry.max_attempts
        if method.upper() not in IDEMPOTENT_METHODS:
            max_attempts = 1

        def should_retry_http_error(exception: BaseException) -> bool:
            if isinstance(exception, httpx.HTTPStatusError):
                return exception.response.status_code in self.config.retry.status_codes
            return False

        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(
                multiplier=self.config.retry.backoff_multiplier,
                min=self.config.retry.min_wait,
                max=self.config.retry.max_wait,
            ),
            retry=(
                retry_if_exception_type(RETRYABLE_NETWORK_EXCEPTIONS)
                | retry_if_exception(should_retry_http_error)
            ),
            before_sleep=self._log_retry_attempt,
            reraise=True,
        )
        async def _request() -> httpx.Response:
            response = await self._client.request(method, url, **kwargs)

            if self._should_retry_status(response):
                self.logger.warning(
                    "http_retryable_status",
                    method=method,
                    url=str(url),
                    status_code=response.status_code,
                )
                response.raise_for_status()

            return response

        return await _request()

    async def request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request with the specified method.

        Only idempotent methods (GET, HEAD, OPTIONS) go through the retry
        policy. Other methods are sent once, so a request the server may
        already have applied is never repeated.

        Args:
            method: HTTP method (GET, POST, HEAD, etc.)
            url: Request URL
            **kwargs: Additional arguments (params, data, headers, ...)

        Returns:
            httpx.Response object
        """
        method = method.upper()
        self.logger.debug("http_request", method=method, url=str(url))
        return await self._make_request_with_retry(method, url, **kwargs)

"""Parser for Jamendo API responses."""

from typing import Any, Dict, Optional

import httpx
import structlog
from pydantic import ValidationError

from ..core.exceptions import JamendoAPIError
from .models import JamendoResponse, OAuthToken

logger = structlog.get_logger(__name__)

INVALID_BODY_CODE = -1


class ResponseParser:
    """Parser for Jamendo API responses."""

    @staticmethod
    def decode(response: httpx.Response, path: str) -> Dict[str, Any]:
        """
        Decode a response body, mapping HTTP and decoding failures to API errors.

        Args:
            response: Response from the API
            path: Endpoint path, for error context

        Returns:
            Decoded JSON object

        Raises:
            JamendoAPIError: If the status is an error or the body is not a JSON object
        """
        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            if isinstance(data, dict):
                ResponseParser.raise_for_error_body(data, path, response.status_code)
            raise JamendoAPIError(
                f"HTTP {response.status_code} {response.reason_phrase}".strip(),
                code=response.status_code,
                status_code=response.status_code,
                path=path,
            )

        if not isinstance(data, dict):
            raise JamendoAPIError(
                "Response body is not a JSON object",
                code=INVALID_BODY_CODE,
                status_code=response.status_code,
                path=path,
            )
        return data

    @staticmethod
    def raise_for_error_body(
        data: Dict[str, Any], path: str, status_code: Optional[int] = None
    ) -> None:
        """
        Raise if a decoded body reports an error.

        Recognizes the ``headers.status == "failed"`` envelope and the OAuth
        ``{"error": ..., "error_description": ...}`` form.

        Raises:
            JamendoAPIError: If the body describes an error
        """
        headers = data.get("headers")
        if isinstance(headers, dict) and str(headers.get("status", "")).lower() == "failed":
            code = headers.get("code")
            message = headers.get("error_message") or "Request failed"
            logger.warning("jamendo_api_error", path=path, code=code, message=message)
            raise JamendoAPIError(
                message,
                code=int(code) if code is not None else status_code,
                status_code=status_code,
                path=path,
            )

        if "error" in data and "access_token" not in data:
            message = data.get("error_description") or str(data["error"])
            logger.warning("jamendo_oauth_error", path=path, error=data["error"])
            raise JamendoAPIError(
                message,
                code=status_code,
                status_code=status_code,
                path=path,
            )

    @staticmethod
    def parse_response(
        data: Dict[str, Any], path: str, status_code: Optional[int] = None
    ) -> JamendoResponse:
        """
        Parse a read/write endpoint envelope.

        Args:
            data: Decoded response body
            path: Endpoint path
            status_code: HTTP status code

        Returns:
            Validated JamendoResponse

        Raises:
            JamendoAPIError: If the envelope reports failure or is malformed
        """
        ResponseParser.raise_for_error_body(data, path, status_code)
        try:
            return JamendoResponse.model_validate(data)
        except ValidationError as e:
            raise JamendoAPIError(
                f"Malformed response envelope: {e.error_count()} validation error(s)",
                code=INVALID_BODY_CODE,
                status_code=status_code,
                path=path,
            ) from e

    @staticmethod
    def parse_token(
        data: Dict[str, Any], path: str = "/oauth/grant", status_code: Optional[int] = None
    ) -> OAuthToken:
        """
        Parse an OAuth grant response.

        Raises:
            JamendoAPIError: If the body is an error or lacks an access token
        """
        ResponseParser.raise_for_error_body(data, path, status_code)
        try:
            return OAuthToken.model_validate(data)
        except ValidationError as e:
            raise JamendoAPIError(
                "Grant response did not contain an access token",
                code=INVALID_BODY_CODE,
                status_code=status_code,
                path=path,
            ) from e

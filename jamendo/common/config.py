"""Configuration models using Pydantic for validation."""

import os
from pathlib import Path
from typing import Optional, Dict, List, Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
import structlog

from ..core.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


class RetryConfig(BaseModel):
    """Configuration for HTTP retry logic with exponential backoff."""

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of attempts (1 disables retries)",
    )
    backoff_multiplier: float = Field(
        default=1.0,
        ge=0.1,
        le=10.0,
        description="Multiplier for exponential backoff calculation",
    )
    min_wait: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Minimum wait time between retries in seconds",
    )
    max_wait: float = Field(
        default=10.0,
        ge=0.0,
        le=300.0,
        description="Maximum wait time between retries in seconds",
    )
    status_codes: List[int] = Field(
        default_factory=lambda: [408, 429, 500, 502, 503, 504],
        description="HTTP status codes that should trigger a retry",
    )

    @field_validator("status_codes")
    @classmethod
    def validate_status_codes(cls, v: List[int]) -> List[int]:
        """Validate that status codes are in valid range."""
        for code in v:
            if not 100 <= code <= 599:
                raise ValueError(f"Invalid HTTP status code: {code}")
        return v


class HTTPConfig(BaseModel):
    """Configuration for HTTP client."""

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Request timeout in seconds",
    )
    max_redirects: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum number of redirects to follow",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    max_connections: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of connections in the pool",
    )
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Maximum number of keep-alive connections",
    )
    user_agent: Optional[str] = Field(
        default=None,
        description="User-Agent header sent with every request (httpx default if unset)",
    )
    retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry configuration",
    )


class FileLoggingConfig(BaseModel):
    """Configuration for file-based logging.

    File logging uses daily rotation with 7-day retention.
    """

    enabled: bool = Field(
        default=False,
        description="Enable file logging",
    )
    path: str = Field(
        default="jamendo.log",
        description="Log file path",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    format: str = Field(
        default="json",
        description="Log format: json or text",
    )
    file: FileLoggingConfig = Field(
        default_factory=FileLoggingConfig,
        description="File logging configuration",
    )
    third_party: Dict[str, str] = Field(
        default_factory=dict,
        description="Log levels for third-party libraries (advanced)",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid format: {v}. Must be one of {valid_formats}")
        return v_lower


class JamendoConfig(BaseModel):
    """Main configuration for the Jamendo client.

    Only the application credentials are mandatory. The API root is built
    from ``base_url`` and ``version`` (``https://api.jamendo.com/v3.0`` by
    default).

    Environment variables take precedence over values loaded from a file:

    - ``JAMENDO_CLIENT_ID``
    - ``JAMENDO_CLIENT_SECRET``
    - ``JAMENDO_API_VERSION``
    """

    client_id: str = Field(
        description="OAuth2 application client id (sent with every request)",
    )
    client_secret: Optional[str] = Field(
        default=None,
        description="OAuth2 application client secret (grant/refresh only)",
    )
    version: str = Field(
        default="v3.0",
        description="API version path segment",
    )
    base_url: str = Field(
        default="https://api.jamendo.com",
        description="API host, without version",
    )
    retry: bool = Field(
        default=True,
        description="Retry transient network failures",
    )
    http: HTTPConfig = Field(
        default_factory=HTTPConfig,
        description="HTTP client configuration",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, v: str) -> str:
        """Reject blank client ids with ConfigurationError."""
        if not v or not v.strip():
            raise ConfigurationError("client_id must not be empty")
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Strip trailing slashes so paths join cleanly."""
        return v.rstrip("/")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Strip surrounding slashes from the version segment."""
        v = v.strip("/")
        if not v:
            raise ValueError("version must not be empty")
        return v

    @property
    def api_url(self) -> str:
        """Effective API root, e.g. ``https://api.jamendo.com/v3.0``."""
        return f"{self.base_url}/{self.version}"

    def effective_http_config(self) -> HTTPConfig:
        """
        Get the HTTP configuration with the retry flag applied.

        When ``retry`` is disabled the retry policy collapses to a single
        attempt; all other HTTP settings are kept.

        Returns:
            HTTPConfig for the underlying client
        """
        if self.retry:
            return self.http
        return self.http.model_copy(
            update={"retry": self.http.retry.model_copy(update={"max_attempts": 1})}
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]] = None) -> "JamendoConfig":
        """
        Build configuration from a mapping, applying environment overrides.

        Args:
            data: Raw configuration values (e.g. parsed YAML)

        Returns:
            Validated JamendoConfig

        Raises:
            ConfigurationError: If no client id is available
        """
        values = dict(data or {})

        overrides = {
            "client_id": os.environ.get("JAMENDO_CLIENT_ID"),
            "client_secret": os.environ.get("JAMENDO_CLIENT_SECRET"),
            "version": os.environ.get("JAMENDO_API_VERSION"),
        }
        for key, value in overrides.items():
            if value:
                values[key] = value

        client_id = values.get("client_id")
        if isinstance(client_id, str):
            client_id = client_id.strip()
            values["client_id"] = client_id
        if not client_id:
            raise ConfigurationError(
                "You must provide a client_id (config file or JAMENDO_CLIENT_ID)"
            )

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            if any(error["loc"][:1] == ("client_id",) for error in e.errors()):
                raise ConfigurationError(f"Invalid client_id: {client_id!r}") from e
            raise

    @classmethod
    def from_env(cls) -> "JamendoConfig":
        """
        Build configuration purely from environment variables.

        Raises:
            ConfigurationError: If JAMENDO_CLIENT_ID is not set
        """
        return cls.from_dict({})

    @classmethod
    def from_yaml(cls, path: Path) -> "JamendoConfig":
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            JamendoConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML is invalid

        Example:
            >>> config = JamendoConfig.from_yaml(Path("jamendo.yaml"))
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        logger.debug("config_loaded", path=str(path))
        return cls.from_dict(data)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "JamendoConfig":
        """
        Load configuration from YAML string.

        Example:
            >>> config = JamendoConfig.from_yaml_string("client_id: abc123")
        """
        return cls.from_dict(yaml.safe_load(yaml_string))

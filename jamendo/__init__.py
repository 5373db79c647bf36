"""Jamendo package initialization."""

from pathlib import Path
from typing import Optional

import structlog

from .common.config import (
    JamendoConfig,
    HTTPConfig,
    RetryConfig,
    LoggingConfig,
    FileLoggingConfig,
)
from .common.logging_config import setup_logging
from .common.http_client import AsyncHTTPClient
from .core.exceptions import (
    JamendoError,
    ConfigurationError,
    JamendoNetworkError,
    JamendoAPIError,
)
from .parsers import JamendoResponse, OAuthToken, ResponseHeaders, ResponseParser
from .api.params import encode_date_range, normalize_parameters
from .api.oauth import JamendoOAuth
from .api.client import JamendoClient

__version__ = "0.1.0"
__all__ = [
    "JamendoClient",
    "JamendoOAuth",
    "AsyncHTTPClient",
    "JamendoConfig",
    "HTTPConfig",
    "RetryConfig",
    "LoggingConfig",
    "FileLoggingConfig",
    "JamendoError",
    "ConfigurationError",
    "JamendoNetworkError",
    "JamendoAPIError",
    "JamendoResponse",
    "OAuthToken",
    "ResponseHeaders",
    "ResponseParser",
    "encode_date_range",
    "normalize_parameters",
    "setup_logging",
    "configure",
    "get_config",
]

# Module-level logger (not configured yet)
logger = structlog.get_logger(__name__)

_config: Optional[JamendoConfig] = None

DEFAULT_CONFIG_FILENAME = "jamendo.yaml"


def configure(
    config_path: Optional[Path] = None, config: Optional[JamendoConfig] = None
) -> JamendoConfig:
    """
    Configure the jamendo package.

    Resolution order:
    - ``config`` if given
    - ``config_path`` if given
    - ``jamendo.yaml`` in the current directory if it exists
    - environment variables only (``JAMENDO_CLIENT_ID`` etc.)

    Logging is set up from the resulting configuration.

    Args:
        config_path: Path to YAML configuration file
        config: Pre-built JamendoConfig (takes precedence over config_path)

    Returns:
        The active JamendoConfig

    Raises:
        ConfigurationError: If no client id can be found

    Example:
        >>> import jamendo
        >>> config = jamendo.configure(config_path=Path("jamendo.yaml"))
    """
    global _config

    if config is not None:
        _config = config
    elif config_path is not None:
        _config = JamendoConfig.from_yaml(config_path)
    else:
        cwd_config_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
        if cwd_config_path.exists():
            config_path = cwd_config_path
            _config = JamendoConfig.from_yaml(cwd_config_path)
        else:
            _config = JamendoConfig.from_env()

    setup_logging(_config.logging)

    logger.info(
        "jamendo_configured",
        version=__version__,
        config_path=str(config_path) if config_path else None,
        api_url=_config.api_url,
        retry=_config.retry,
    )
    return _config


def get_config() -> JamendoConfig:
    """
    Get current configuration, configuring from defaults on first use.

    Raises:
        ConfigurationError: If not configured and no client id can be found
    """
    if _config is None:
        return configure()
    return _config

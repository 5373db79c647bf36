"""Structured logging setup for the Jamendo client.

Log records never go to stdout, which the ``jamendo`` command reserves for
API output. Console records are written to stderr; an optional daily rotated
file always receives JSON lines.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, List

import structlog

from .config import LoggingConfig

THIRD_PARTY_DEFAULTS = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "tenacity": "INFO",
}

# Shared by structlog loggers and by records from stdlib loggers (httpx, tenacity)
SHARED_PROCESSORS: List[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging(config: LoggingConfig) -> None:
    """
    Route structlog and standard library logging through the same handlers.

    ``format="json"`` renders JSON lines on stderr, ``format="text"`` renders
    the structlog console format (colored when stderr is a terminal).

    Args:
        config: LoggingConfig with level, format, file and third-party levels

    Example:
        >>> from jamendo.common.config import LoggingConfig
        >>> setup_logging(LoggingConfig(level="DEBUG", format="text"))
    """
    log_level = getattr(logging, config.level.upper())

    if config.format == "json":
        console_renderer: Any = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_formatter(console_renderer))
    handlers: List[logging.Handler] = [console_handler]

    if config.file and config.file.enabled:
        log_path = Path(config.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=str(log_path),
            when="midnight",
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(log_level)
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for library, level in {**THIRD_PARTY_DEFAULTS, **config.third_party}.items():
        logging.getLogger(library).setLevel(getattr(logging, level.upper()))

    structlog.configure(
        processors=SHARED_PROCESSORS + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

"""Command-line access to the Jamendo API."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml

import jamendo
from jamendo.api.client import JamendoClient
from jamendo.common.config import JamendoConfig, LoggingConfig
from jamendo.common.logging_config import setup_logging
from jamendo.core.exceptions import JamendoError

logger = structlog.get_logger(__name__)


def parse_pairs(pairs: List[str]) -> Dict[str, Any]:
    """
    Turn ``key=value`` arguments into request parameters.

    Repeating a key builds a list (``tags=rock tags=pop``).

    Raises:
        ValueError: If an argument has no ``=``
    """
    parameters: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got '{pair}'")
        if key in parameters:
            existing = parameters[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                parameters[key] = [existing, value]
        else:
            parameters[key] = value
    return parameters


def load_config(args: argparse.Namespace) -> JamendoConfig:
    """Load configuration and apply command-line overrides."""
    if args.config:
        config = JamendoConfig.from_yaml(args.config)
    elif (Path.cwd() / jamendo.DEFAULT_CONFIG_FILENAME).exists():
        config = JamendoConfig.from_yaml(Path.cwd() / jamendo.DEFAULT_CONFIG_FILENAME)
    else:
        config = JamendoConfig.from_env()

    updates: Dict[str, Any] = {}
    if args.no_retry:
        updates["retry"] = False
    if args.log_level:
        updates["logging"] = config.logging.model_copy(update={"level": args.log_level.upper()})
    if updates:
        config = config.model_copy(update=updates)

    return jamendo.configure(config=config)


async def run_get(config: JamendoConfig, path: str, parameters: Dict[str, Any]) -> Dict[str, Any]:
    if not path.startswith("/"):
        path = f"/{path}"
    async with JamendoClient(config) as client:
        return await client.fetch(path, parameters)


async def run_grant(config: JamendoConfig, code: str, redirect_uri: str) -> Dict[str, Any]:
    async with JamendoClient(config) as client:
        token = await client.grant(code, redirect_uri)
    return token.model_dump(exclude={"obtained_at"})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jamendo",
        description="Query the Jamendo music catalog API",
    )
    parser.add_argument("--config", "-c", type=Path, help="YAML configuration file")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        help="Override the configured log level",
    )
    parser.add_argument(
        "--no-retry",
        action="store_true",
        help="Do not retry transient network failures",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    get_parser = subparsers.add_parser(
        "get",
        help="GET a read endpoint",
        description="GET a read endpoint, e.g. 'jamendo get tracks id=245'",
    )
    get_parser.add_argument("path", help="Endpoint path (tracks, albums/tracks, ...)")
    get_parser.add_argument("params", nargs="*", help="key=value parameters")

    auth_parser = subparsers.add_parser(
        "authorize-url",
        help="Print the OAuth authorization URL",
    )
    auth_parser.add_argument("--redirect-uri", required=True)
    auth_parser.add_argument("--scope", default="music")
    auth_parser.add_argument("--state")

    grant_parser = subparsers.add_parser(
        "grant",
        help="Exchange an authorization code for a token",
    )
    grant_parser.add_argument("--code", required=True)
    grant_parser.add_argument("--redirect-uri", required=True)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the jamendo CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    # stderr logging until the configured settings take over
    setup_logging(LoggingConfig())

    try:
        config = load_config(args)

        if args.command == "get":
            result: Any = asyncio.run(run_get(config, args.path, parse_pairs(args.params)))
        elif args.command == "authorize-url":
            client = JamendoClient(config)
            print(client.authorize_url(args.redirect_uri, scope=args.scope, state=args.state))
            return 0
        else:
            result = asyncio.run(run_grant(config, args.code, args.redirect_uri))
    except (JamendoError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.debug("cli_command_failed", command=args.command, error=str(e))
        return 1

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

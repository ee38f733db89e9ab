"""Entry point for the Sentry MCP server.

This module provides the command line interface. It handles:
- Configuration loading
- Logging setup with secret sanitization
- Error reporting setup
- Serving the MCP tools
- The operator side of the OAuth flow (authorize URL, code exchange)
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from sentry_mcp._version import __version__

log = structlog.get_logger()


def setup_logging(debug: bool = False, log_format: str = "console") -> None:
    """Configure structured logging with secret sanitization.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
    """
    from sentry_mcp.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.INFO
    configure_logging(level=level, log_format=LogFormat(log_format.lower()))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="sentry-mcp",
        description="Sentry MCP - search Sentry errors by source file from an MCP client",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config/config.yaml"),
        help="Path to configuration file (default: config/config.yaml)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse config and validate without running the command",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Serve the MCP tools (default)")

    authorize = subparsers.add_parser(
        "authorize-url",
        help="Print the Sentry authorization URL for the configured OAuth app",
    )
    authorize.add_argument("--state", default=None, help="Opaque state to round-trip")

    exchange = subparsers.add_parser(
        "exchange-code",
        help="Exchange an authorization code for an access token",
    )
    exchange.add_argument("code", help="Authorization code returned by Sentry")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "serve"
    return args


async def serve(config_path: Path, dry_run: bool = False) -> int:
    """Load configuration and serve the MCP tools.

    Args:
        config_path: Path to configuration file
        dry_run: If True, only validate config without serving

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from sentry_mcp.adapters.observability import SentrySdkSink, configure_observability
    from sentry_mcp.config.loader import load_config
    from sentry_mcp.core.reporter import ErrorReporter
    from sentry_mcp.server import create_server, run_server
    from sentry_mcp.utils.logging import configure_logging

    config = load_config(config_path)
    log.info("configuration_loaded", path=str(config_path))

    configure_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        file_path=config.logging.file.path if config.logging.file.enabled else None,
        file_enabled=config.logging.file.enabled,
    )

    server = create_server(config, ErrorReporter(SentrySdkSink()))

    if dry_run:
        log.info("dry_run_mode_config_valid")
        return 0

    configure_observability(config.observability)
    await run_server(server, config.server.transport)
    return 0


def authorize_url(config_path: Path, state: str | None) -> int:
    """Print the upstream authorization URL."""
    from sentry_mcp.config.loader import load_config
    from sentry_mcp.core.oauth import build_authorize_url
    from sentry_mcp.models.oauth import AuthorizationRequest

    config = load_config(config_path)
    if config.oauth is None:
        raise ValueError("oauth section is required for authorize-url")

    url = build_authorize_url(
        AuthorizationRequest(
            upstream_url=config.oauth.authorize_url,
            client_id=config.oauth.client_id,
            scope=config.oauth.scope,
            redirect_uri=config.oauth.redirect_uri,
            state=state,
        )
    )
    print(url)
    return 0


async def exchange_code(config_path: Path, code: str) -> int:
    """Exchange an authorization code and print the token response as JSON."""
    import httpx

    from sentry_mcp.config.loader import load_config
    from sentry_mcp.core.oauth import exchange_code_for_access_token
    from sentry_mcp.models.oauth import TokenExchangeFailure, TokenExchangeRequest

    config = load_config(config_path)
    if config.oauth is None:
        raise ValueError("oauth section is required for exchange-code")

    async with httpx.AsyncClient(timeout=config.http.timeout) as client:
        result = await exchange_code_for_access_token(
            TokenExchangeRequest(
                client_id=config.oauth.client_id,
                client_secret=config.oauth.client_secret,
                code=code,
                redirect_uri=config.oauth.redirect_uri,
                upstream_url=config.oauth.token_url,
            ),
            client,
        )

    if isinstance(result, TokenExchangeFailure):
        log.error(
            "token_exchange_failed",
            reason=result.reason.value,
            message=result.message,
            upstream_status=result.upstream_status,
        )
        return 1

    print(result.token.model_dump_json())
    return 0


async def run_command(args: argparse.Namespace) -> int:
    """Dispatch the selected subcommand.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    log.info("starting_sentry_mcp", version=__version__, command=args.command)

    try:
        if args.command == "authorize-url":
            return authorize_url(args.config, args.state)
        if args.command == "exchange-code":
            return await exchange_code(args.config, args.code)
        return await serve(args.config, args.dry_run)

    except FileNotFoundError as e:
        log.error("configuration_file_not_found", path=str(args.config), error=str(e))
        return 1
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return 1
    except Exception as e:
        log.exception("fatal_error", error=str(e))
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_format=args.format)

    try:
        return asyncio.run(run_command(args))
    except KeyboardInterrupt:
        log.info("shutting_down_gracefully")
        return 0


if __name__ == "__main__":
    sys.exit(main())

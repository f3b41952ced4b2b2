# main.py

"""Entry point for the daily_deals server (servers or one-shot CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging

logger = logging.getLogger("daily_deals.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="daily_deals",
        description=(
            "Extract today's Big Watermelon specials with Gemini and "
            "serve them over MCP or HTTP."
        ),
    )
    parser.add_argument(
        "--serve",
        choices=["mcp", "http"],
        default=None,
        help="Start a server: 'mcp' (SSE tool) or 'http' (action endpoint).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format for a one-shot fetch (default: json).",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        default=False,
        help="Ignore today's cache and run the full extraction.",
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        default=False,
        help="Delete leftover uploaded images from Gemini and exit.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check the specials page and Gemini connectivity.",
    )
    return parser


def _run_server(kind: str) -> None:
    """Start the chosen server and block until it stops."""
    try:
        if kind == "mcp":
            from src.server.mcp_server import run_mcp_server

            run_mcp_server()
        else:
            from src.server.http_server import run_http_server

            run_http_server()
    except Exception:
        logger.critical("Fatal error in %s server", kind, exc_info=True)
        raise
    finally:
        logger.info("daily_deals %s server shutting down", kind)


def _run_fetch(args: argparse.Namespace) -> None:
    """Fetch once, print and exit."""
    from src.cli.runner import cli_fetch

    exit_code = asyncio.run(
        cli_fetch(
            output_format=args.output_format,
            force_refresh=args.refresh,
        )
    )
    sys.exit(exit_code)


def _run_cleanup() -> None:
    from src.cli.runner import run_cleanup

    sys.exit(run_cleanup())


def _run_health_check() -> None:
    from src.cli.runner import run_health_check

    sys.exit(asyncio.run(run_health_check()))


def main() -> None:
    """Route to a server, a maintenance command or a one-shot fetch."""
    parser = _build_parser()
    args = parser.parse_args()

    console_level = logging.INFO if args.serve else logging.WARNING
    log_file = setup_logging(console_level)
    logger.info("daily_deals starting, log file: %s", log_file)

    if args.cleanup:
        _run_cleanup()
    elif args.health:
        _run_health_check()
    elif args.serve:
        _run_server(args.serve)
    else:
        _run_fetch(args)


if __name__ == "__main__":
    main()

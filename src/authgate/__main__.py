"""CLI entry point: python -m authgate."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

from authgate import serve
from authgate.config import LOG_LEVELS, Settings

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the authgate CLI.

    Every option defaults to None so that unset flags fall back to the
    ``AUTHGATE_*`` environment variables and then to built-in defaults.
    """
    parser = argparse.ArgumentParser(
        prog="python -m authgate",
        description="Serve the orders API behind identity-provider token verification.",
    )

    parser.add_argument(
        "--host",
        default=None,
        help="Host address to bind (default: $AUTHGATE_HOST or 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: $AUTHGATE_PORT or 8000, range: 1-65535).",
    )

    # Identity provider
    parser.add_argument(
        "--verify-url",
        default=None,
        help="Identity provider 'who am I' endpoint (default: $AUTHGATE_VERIFY_URL or Authing users/me).",
    )
    parser.add_argument(
        "--verify-timeout",
        type=float,
        default=None,
        help="Timeout in seconds for each verification request (default: $AUTHGATE_VERIFY_TIMEOUT or 10).",
    )

    # Storage
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: $AUTHGATE_DATABASE_URL or sqlite:///orders.db).",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: $AUTHGATE_LOG_LEVEL or INFO).",
    )

    return parser


def main() -> None:
    """CLI entry point for launching the authgate server.

    Exit codes:
        0 - Normal shutdown
        1 - Invalid settings (bad port, timeout, or environment value)
        2 - Startup failure (argparse error, serve() exception)
    """
    parser = _build_parser()
    args = parser.parse_args()

    overrides = {
        "host": args.host,
        "port": args.port,
        "verify_url": args.verify_url,
        "verify_timeout": args.verify_timeout,
        "database_url": args.database_url,
        "log_level": args.log_level,
    }
    try:
        settings = Settings.from_env()
        settings = dataclasses.replace(settings, **{k: v for k, v in overrides.items() if v is not None})
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        serve(settings)
    except Exception:
        logger.exception("Server startup failed.")
        sys.exit(2)


if __name__ == "__main__":
    main()

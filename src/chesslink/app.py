"""Application entry point."""

from __future__ import annotations

import argparse
import sys

from chesslink.ui.settings import AppSettings


def parse_args(argv: list[str] | None = None) -> AppSettings:
    """Build :class:`AppSettings` from the command line."""
    defaults = AppSettings()
    parser = argparse.ArgumentParser(
        prog="chesslink",
        description="Play a remote chess engine with a Fischer clock.",
    )
    parser.add_argument(
        "--server", default=defaults.server_url, help="engine service base URL"
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="accept self-signed TLS certificates",
    )
    parser.add_argument(
        "--minutes",
        type=float,
        default=defaults.base_minutes,
        help="base time per side in minutes (fractions allowed)",
    )
    parser.add_argument(
        "--increment",
        type=float,
        default=defaults.increment_seconds,
        help="increment per move in seconds (fractions allowed)",
    )
    parser.add_argument(
        "--side",
        choices=("white", "black"),
        default=defaults.player_color,
        help="side you play",
    )
    parser.add_argument(
        "--heartbeat",
        type=int,
        default=defaults.heartbeat_interval_ms,
        help="keep-alive interval in milliseconds",
    )
    parser.add_argument("--log-level", default=defaults.log_level)
    args = parser.parse_args(argv)

    if args.minutes < 0 or args.increment < 0:
        parser.error("time control values must be non-negative")

    return AppSettings(
        server_url=args.server,
        verify_tls=not args.insecure,
        heartbeat_interval_ms=args.heartbeat,
        base_minutes=args.minutes,
        increment_seconds=args.increment,
        player_color=args.side,
        log_level=args.log_level,
    )


def main() -> None:
    """Launch the chesslink console client."""
    from chesslink.ui.bootstrap import run_application

    settings = parse_args(sys.argv[1:])
    sys.exit(run_application(settings, [sys.argv[0]]))


if __name__ == "__main__":
    main()

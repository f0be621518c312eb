"""Entry point for running the CLI as a module."""

import argparse
import asyncio
import sys

from .inobot_cli import main


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Ask InoBot questions from the terminal. "
        "The conversation is kept locally and sent with every question.",
    )

    parser.add_argument(
        "--host",
        type=str,
        default="localhost",
        help="Server host (default: localhost)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Server port (default: 8080)",
    )
    parser.add_argument(
        "--api-path",
        type=str,
        default="/api/v1/ask",
        help="API path (default: /api/v1/ask)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="Seconds to wait for one answer (default: 120)",
    )
    parser.add_argument(
        "--max-history",
        type=int,
        default=20,
        help="Most recent messages sent with each question (default: 20)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-references",
        action="store_true",
        help="Hide the source list under each answer",
    )

    return parser.parse_args()


def cli_entry() -> None:
    """CLI entry point."""
    args = parse_args()

    try:
        asyncio.run(
            main(
                host=args.host,
                port=args.port,
                api_path=args.api_path,
                timeout=args.timeout,
                max_history=args.max_history,
                debug=args.debug,
                show_references=not args.no_references,
            )
        )
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli_entry()

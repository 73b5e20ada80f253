"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    python -m webworker                        # Serve the current directory
    python -m webworker --root ./www           # Serve ./www
    python -m webworker --port 3000            # Custom port
    python -m webworker --host 0.0.0.0         # Listen on all interfaces
    python -m webworker --jpg-as-png           # Legacy .jpg Content-Type

Unset options fall back to WEBWORKER_* environment variables, then to the
ServerConfig defaults.

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig
from .server import WebServer


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="webworker",
        description="Single-request HTTP/1.1 responder serving HTML and images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m webworker                       # Serve current directory on 8080
  python -m webworker --root ./www          # Serve ./www
  python -m webworker --port 3000           # Custom port
  python -m webworker --log-level DEBUG     # Show every request line
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: 8080)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=None,
        help="Seconds to wait for the request (default: 30)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Directory to serve files from (default: current directory)"
    )

    parser.add_argument(
        "--jpg-as-png",
        action="store_true",
        help="Send .jpg files as image/png (legacy behaviour)"
    )

    parser.add_argument(
        "--no-confine",
        action="store_true",
        help="Allow request paths that resolve outside the web root"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"webworker {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment first, then let explicit CLI flags override it."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.timeout is not None:
        config.request_timeout = args.timeout
    if args.root is not None:
        config.root_dir = args.root
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format
    if args.jpg_as_png:
        config.jpg_as_png = True
    if args.no_confine:
        config.confine_to_root = False

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    try:
        server = WebServer(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


# This allows running: python -m webworker
if __name__ == "__main__":
    sys.exit(main())

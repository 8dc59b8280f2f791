"""Argument parsing for the widgetbridge CLI."""

import argparse
from pathlib import Path


def add_config_arg(parser: argparse.ArgumentParser) -> None:
    """Add --config argument to a parser."""
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to config.json (default: $WIDGETBRIDGE_CONFIG or .widgetbridge/config.json)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="widgetbridge",
        description="Wallet RPC bridge for embedded widgets",
    )
    subparsers = parser.add_subparsers(dest="command")

    # serve - run the WebSocket bridge server
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the bridge server",
        description="Serve wallet RPC requests from an embedded widget over WebSocket.",
    )
    add_config_arg(serve_parser)
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Interface to bind (default: from config, 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="Port to listen on (default: from config, 8787)",
    )
    serve_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show DEBUG output on the console",
    )
    serve_parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path(".widgetbridge/logs"),
        help="Directory for bridge.log (default: .widgetbridge/logs)",
    )

    # config - print effective configuration
    config_parser = subparsers.add_parser(
        "config",
        help="Print the effective configuration as JSON",
    )
    add_config_arg(config_parser)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)

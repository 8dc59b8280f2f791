"""Command-line interface."""

from widgetbridge.cli.main import main

__all__ = ["main"]

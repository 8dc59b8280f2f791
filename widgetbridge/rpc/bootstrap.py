"""Logging setup for the bridge server."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_FILE_NAME = "bridge.log"


def configure_bridge_logging(
    log_dir: Path,
    level: int = logging.INFO,
    console_level: int = logging.WARNING,
) -> Path:
    """Configure file and console logging for the widgetbridge namespace.

    Logs are written to `{log_dir}/bridge.log` with automatic rotation
    (max 5MB per file, 3 backup files). Calling again replaces the handlers.

    Args:
        log_dir: Directory for bridge.log. Created if it doesn't exist.
        level: Logging level for file output.
        console_level: Logging level for stderr output.

    Returns:
        Path to the bridge.log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))

    bridge_logger = logging.getLogger("widgetbridge")
    bridge_logger.setLevel(min(level, console_level))

    # Close replaced handlers so rotated files aren't left open
    for handler in bridge_logger.handlers:
        handler.close()
    bridge_logger.handlers.clear()

    bridge_logger.addHandler(file_handler)
    bridge_logger.addHandler(console_handler)
    bridge_logger.propagate = False

    logger.info("Bridge logging configured: %s", log_file)
    return log_file

"""Configuration loading with fail-fast behavior.

Resolution order:
1. Explicit path argument
2. File named by the WIDGETBRIDGE_CONFIG environment variable
3. Project local config (cwd/.widgetbridge/config.json)
4. Pydantic defaults

The first source found wins; layers are not merged.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from widgetbridge.config.schema import Config
from widgetbridge.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "WIDGETBRIDGE_CONFIG"
LOCAL_CONFIG = Path(".widgetbridge") / "config.json"


def load_config(path: Path | None = None, cwd: Path | None = None) -> Config:
    """Load configuration.

    Args:
        path: Explicit config file path. Must exist if given.
        cwd: Working directory for local config lookup. Defaults to Path.cwd().

    Returns:
        Validated Config object.

    Raises:
        ConfigError: If a config file is missing (explicit/env path only),
            contains invalid JSON, or fails validation.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path)

    required = path is not None
    if path is None:
        path = (cwd or Path.cwd()) / LOCAL_CONFIG

    data = read_config_json(path, required=required)
    if data is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Config loaded from: %s", path)
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e


def read_config_json(path: Path, required: bool = True) -> dict[str, Any] | None:
    """Read the raw JSON object from a config file.

    An empty file reads as an empty object, so it validates to defaults.

    Args:
        path: Config file to read.
        required: If False, a missing file returns None instead of raising.

    Raises:
        ConfigError: If a required file is missing, the file can't be read,
            or it doesn't hold a JSON object.
    """
    if not path.is_file():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return None

    try:
        # utf-8-sig tolerates the BOM some Windows editors write
        content = path.read_text(encoding="utf-8-sig").strip()
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e

    if not content:
        return {}

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected object in {path}, got {type(data).__name__}")
    return data

"""Configuration loading and validation."""

from widgetbridge.config.loader import CONFIG_ENV_VAR, LOCAL_CONFIG, load_config, read_config_json
from widgetbridge.config.schema import Config, ServerConfig, SessionConfig, WidgetConfig

__all__ = [
    "CONFIG_ENV_VAR",
    "Config",
    "LOCAL_CONFIG",
    "ServerConfig",
    "SessionConfig",
    "WidgetConfig",
    "load_config",
    "read_config_json",
]

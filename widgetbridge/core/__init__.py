"""Core errors and encoding helpers."""

from widgetbridge.core.errors import (
    BridgeError,
    ConfigError,
    HexDecodeError,
    SerializationError,
    TransportError,
)
from widgetbridge.core.hexutil import hex_to_int, to_hex

__all__ = [
    "BridgeError",
    "ConfigError",
    "HexDecodeError",
    "SerializationError",
    "TransportError",
    "hex_to_int",
    "to_hex",
]

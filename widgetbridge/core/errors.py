"""Typed exception hierarchy for widgetbridge."""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base class for all widgetbridge errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(BridgeError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""


class TransportError(BridgeError):
    """Raised for message channel and window delivery issues."""


class SerializationError(TransportError):
    """Raised when an outbound payload cannot be encoded as JSON."""


class HexDecodeError(BridgeError):
    """Raised when a hex-prefixed quantity cannot be decoded to an integer."""

    def __init__(self, value: Any, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Cannot decode {value!r} as hex quantity: {reason}")

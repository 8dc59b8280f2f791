"""Cross-window message transport.

A MessageChannel is the host's shared inbound bus: every window that can
talk to the host publishes MessageEvents on it, RPC or not. The
TransportAdapter owns one subscription on that bus for the lifetime of a
bridge and posts serialized payloads back to a target window.

Example:
    channel = MessageChannel()
    widget = LocalWindow()

    adapter = TransportAdapter(channel)
    adapter.subscribe(on_message)

    channel.publish(MessageEvent(data={"id": "1", "method": "eth_chainId"}, source=widget))
    await adapter.post(widget, {"id": "1", "success": True, "data": "0x1"})

    adapter.close()
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from widgetbridge.core.errors import SerializationError, TransportError

logger = logging.getLogger(__name__)


class Window(Protocol):
    """An addressable message endpoint, such as an embedded document."""

    @property
    def closed(self) -> bool:
        """True once the window can no longer receive messages."""
        ...

    async def post_message(self, message: str) -> None:
        """Deliver a serialized message.

        Raises:
            TransportError: If the window cannot accept the message.
        """
        ...


@dataclass(frozen=True)
class MessageEvent:
    """One inbound message.

    Attributes:
        data: Decoded payload. Untrusted and of any shape.
        source: Window that sent it, if known.
        origin: Sender origin as reported by the carrier ("" if unknown).
    """

    data: Any
    source: Window | None = None
    origin: str = ""


Listener = Callable[[MessageEvent], None]


class MessageChannel:
    """Shared bus for inbound messages.

    Listeners are called synchronously in subscription order. A listener
    that raises is logged and does not stop delivery to the others.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        """Remove a listener. Safe to call if it was never added."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: MessageEvent) -> None:
        """Deliver an event to every current listener."""
        # Copy so listeners may unsubscribe while handling
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Message listener failed")


class LocalWindow:
    """In-process window that records what is posted to it.

    Used to embed a widget in the same process, and in tests.
    """

    def __init__(self, origin: str = "") -> None:
        self.origin = origin
        self.messages: list[str] = []
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    async def post_message(self, message: str) -> None:
        if self._closed:
            raise TransportError("Window is closed")
        self.messages.append(message)
        await self._queue.put(message)

    async def receive(self) -> Any:
        """Wait for the next posted message and decode it."""
        return json.loads(await self._queue.get())

    def received(self) -> list[Any]:
        """Decode every message posted so far."""
        return [json.loads(m) for m in self.messages]


class TransportAdapter:
    """Owns one bridge's subscription on a MessageChannel.

    Posting never fails the bridge: posts after close, or to a missing or
    closed window, are dropped and reported as False.
    """

    def __init__(self, channel: MessageChannel) -> None:
        self._channel = channel
        self._listener: Listener | None = None
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def is_subscribed(self) -> bool:
        return self._listener is not None and not self._closed

    def subscribe(self, listener: Listener) -> None:
        """Register the inbound listener.

        Raises:
            TransportError: If already subscribed or closed.
        """
        if self._closed:
            raise TransportError("Transport is closed")
        if self._listener is not None:
            raise TransportError("Transport already has a listener")
        self._listener = listener
        self._channel.add_listener(listener)

    async def post(self, target: Window | None, payload: Any) -> bool:
        """Serialize payload and deliver it to target.

        Returns:
            True if the window accepted the message, False if it was dropped.

        Raises:
            SerializationError: If payload is not JSON-serializable.
        """
        if self._closed:
            logger.debug("Dropping post after transport close")
            return False

        try:
            message = json.dumps(payload, separators=(",", ":"), allow_nan=False)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Payload is not JSON-serializable: {e}") from e

        if target is None or target.closed:
            logger.debug("Dropping post: target window unavailable")
            return False

        try:
            await target.post_message(message)
        except TransportError as e:
            logger.debug("Dropping post: %s", e.message)
            return False
        return True

    def close(self) -> None:
        """Unsubscribe the listener. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._listener is not None:
            self._channel.remove_listener(self._listener)
            self._listener = None

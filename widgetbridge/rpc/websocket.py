"""WebSocket host for the widget bridge.

Each WebSocket connection stands in for a window. The first connection is
the embedded widget and gets a WidgetBridge; frames from any other
connection still go onto the shared channel, where the bridge's validator
rejects them as foreign. When the widget's connection closes its bridge is
disposed, and the next connection starts over with fresh session state.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import websockets
from websockets.asyncio.server import ServerConnection, serve

from widgetbridge.config.schema import Config
from widgetbridge.core.errors import TransportError
from widgetbridge.rpc.bridge import WidgetBridge
from widgetbridge.rpc.handlers import WalletBackend
from widgetbridge.rpc.transport import MessageChannel, MessageEvent

logger = logging.getLogger(__name__)


class WebSocketWindow:
    """Window backed by a WebSocket server connection."""

    def __init__(self, connection: ServerConnection) -> None:
        self._connection = connection
        self._closed = False
        request = getattr(connection, "request", None)
        self.origin: str = (request.headers.get("Origin") or "") if request is not None else ""

    @property
    def closed(self) -> bool:
        return self._closed

    def mark_closed(self) -> None:
        self._closed = True

    async def post_message(self, message: str) -> None:
        if self._closed:
            raise TransportError("WebSocket window is closed")
        try:
            await self._connection.send(message)
        except websockets.exceptions.ConnectionClosed as e:
            self._closed = True
            raise TransportError(f"WebSocket connection closed: {e}") from e


def decode_frame(frame: str | bytes) -> Any:
    """Decode a JSON frame. Frames that aren't JSON are returned as-is."""
    try:
        return json.loads(frame)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return frame


class BridgeServer:
    """Serves one widget bridge over WebSocket connections."""

    def __init__(self, config: Config | None = None, wallet: WalletBackend | None = None) -> None:
        self._config = config or Config()
        self._wallet = wallet
        self._channel = MessageChannel()
        self._bridge: WidgetBridge | None = None
        self.started = asyncio.Event()

    @property
    def channel(self) -> MessageChannel:
        return self._channel

    @property
    def bridge(self) -> WidgetBridge | None:
        """The bridge for the currently attached widget, if any."""
        return self._bridge

    async def handle_connection(self, connection: ServerConnection) -> None:
        """Pump frames from one connection onto the channel until it closes."""
        window = WebSocketWindow(connection)
        if self._bridge is None:
            bridge = WidgetBridge(self._config, self._wallet)
            bridge.mount(self._channel, window)
            self._bridge = bridge
            logger.info("Widget attached (origin=%r)", window.origin)
        else:
            logger.info("Extra connection (origin=%r); its requests will be ignored", window.origin)

        try:
            async for frame in connection:
                self._channel.publish(
                    MessageEvent(data=decode_frame(frame), source=window, origin=window.origin)
                )
        except websockets.exceptions.ConnectionClosed:
            logger.debug("WebSocket connection closed")
        finally:
            window.mark_closed()
            if self._bridge is not None and self._bridge.window is window:
                bridge, self._bridge = self._bridge, None
                await bridge.aclose()
                logger.info("Widget detached")

    async def serve(self) -> None:
        """Listen until cancelled."""
        host = self._config.server.host
        port = self._config.server.port
        async with serve(self.handle_connection, host, port) as server:
            logger.info("Bridge server listening on ws://%s:%d", host, port)
            self.started.set()
            try:
                await server.serve_forever()
            finally:
                if self._bridge is not None:
                    await self._bridge.aclose()
                    self._bridge = None

"""Inbound message guard."""

from __future__ import annotations

from widgetbridge.rpc.protocol import is_request
from widgetbridge.rpc.transport import MessageEvent, Window


class MessageValidator:
    """Decides whether an inbound event is an RPC request from our widget.

    Accepts only request-shaped payloads whose source is the exact window
    the bridge is attached to and, if configured, whose origin matches.
    """

    def __init__(self, window: Window, allowed_origin: str | None = None) -> None:
        self._window = window
        self._allowed_origin = allowed_origin

    @property
    def window(self) -> Window:
        return self._window

    def accepts(self, event: MessageEvent) -> bool:
        """Return True if the event should be dispatched. No side effects."""
        if event.source is not self._window:
            return False
        if self._allowed_origin is not None and event.origin != self._allowed_origin:
            return False
        return is_request(event.data)

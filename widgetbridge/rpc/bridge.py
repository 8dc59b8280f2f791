"""Widget bridge lifecycle.

A WidgetBridge is created with its session state and method registry,
mounted on a message channel for one embedded window, and disposed when
the host tears the widget down.
"""

from __future__ import annotations

import logging
from types import TracebackType

from widgetbridge.config.schema import Config
from widgetbridge.core.errors import BridgeError
from widgetbridge.rpc.dispatcher import Dispatcher
from widgetbridge.rpc.handlers import MethodRegistry, WalletBackend
from widgetbridge.rpc.state import SessionState
from widgetbridge.rpc.transport import MessageChannel, TransportAdapter, Window
from widgetbridge.rpc.validator import MessageValidator

logger = logging.getLogger(__name__)


class WidgetBridge:
    """Serves wallet RPC calls from one embedded widget window.

    Mount once, dispose once. A disposed bridge cannot be mounted again;
    create a new one (with fresh session state) instead.

    Example:
        channel = MessageChannel()
        async with WidgetBridge(config) as bridge:
            bridge.mount(channel, widget_window)
            ...
    """

    def __init__(self, config: Config | None = None, wallet: WalletBackend | None = None) -> None:
        self._config = config or Config()
        self._state = SessionState.from_config(self._config.session)
        self._registry = MethodRegistry(self._state, wallet)
        self._transport: TransportAdapter | None = None
        self._dispatcher: Dispatcher | None = None
        self._window: Window | None = None
        self._disposed = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def window(self) -> Window | None:
        """The widget window this bridge is attached to."""
        return self._window

    @property
    def dispatcher(self) -> Dispatcher | None:
        return self._dispatcher

    @property
    def is_mounted(self) -> bool:
        return self._dispatcher is not None and not self._disposed

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def mount(self, channel: MessageChannel, window: Window) -> None:
        """Attach to a window and start listening on the channel.

        Raises:
            BridgeError: If already mounted or disposed.
        """
        if self._disposed:
            raise BridgeError("Bridge has been disposed")
        if self._dispatcher is not None:
            raise BridgeError("Bridge is already mounted")

        transport = TransportAdapter(channel)
        validator = MessageValidator(window, self._config.widget.allowed_origin)
        dispatcher = Dispatcher(
            self._registry,
            validator,
            transport,
            handler_timeout=self._config.handler_timeout,
        )
        transport.subscribe(dispatcher.handle_event)

        self._transport = transport
        self._dispatcher = dispatcher
        self._window = window
        logger.info(
            "Bridge mounted (account=%s, chain_id=%d)",
            self._state.account,
            self._state.chain_id,
        )

    def dispose(self) -> None:
        """Unsubscribe from the channel and drop in-flight requests. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        if self._transport is not None:
            self._transport.close()
        if self._dispatcher is not None:
            pending = self._dispatcher.in_flight
            self._dispatcher.close()
            logger.info("Bridge disposed (%d in-flight requests dropped)", pending)

    async def aclose(self) -> None:
        """Dispose and wait for cancelled requests to unwind."""
        self.dispose()
        if self._dispatcher is not None:
            await self._dispatcher.wait_closed()

    async def __aenter__(self) -> WidgetBridge:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

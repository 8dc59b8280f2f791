"""Widget RPC dispatcher.

Turns each accepted inbound message into exactly one response envelope:

- Non-RPC or foreign messages are ignored (no response).
- Each accepted request runs as its own task, so a slow handler never
  delays a fast one. Responses go out in the order handlers settle.
- Handler failures become failure envelopes; they never escape the
  listener.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from widgetbridge.core.errors import SerializationError
from widgetbridge.rpc.handlers import MethodRegistry
from widgetbridge.rpc.protocol import (
    INTERNAL_ERROR,
    RpcError,
    UnsupportedMethodError,
    error_from_exception,
    make_error_response,
    make_success_response,
    parse_request,
    serialize_response,
)
from widgetbridge.rpc.transport import MessageEvent, TransportAdapter
from widgetbridge.rpc.types import Request, Response
from widgetbridge.rpc.validator import MessageValidator

logger = logging.getLogger(__name__)


class Dispatcher:
    """Routes validated requests to the method registry and posts responses.

    Attributes:
        in_flight: Number of requests whose response has not been posted yet.
    """

    def __init__(
        self,
        registry: MethodRegistry,
        validator: MessageValidator,
        transport: TransportAdapter,
        handler_timeout: float | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Handlers for every supported method.
            validator: Guard deciding which inbound events are ours.
            transport: Used to post responses to the validator's window.
            handler_timeout: Seconds before a pending handler is abandoned
                with a failure response. None waits forever.
        """
        self._registry = registry
        self._validator = validator
        self._transport = transport
        self._handler_timeout = handler_timeout
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def handle_event(self, event: MessageEvent) -> None:
        """Channel listener: validate and start serving a request.

        Returns immediately; the handler runs in a new task.
        """
        if self._closed:
            return
        if not self._validator.accepts(event):
            logger.debug("Ignoring message that is not an RPC request from the widget")
            return

        request = parse_request(event.data)
        logger.debug("Request %s: %s", request.id, request.method)
        task = asyncio.get_running_loop().create_task(
            self._serve(request), name=f"widget-rpc-{request.id}"
        )
        # Hold a strong reference until the task finishes
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def dispatch(self, request: Request) -> Response:
        """Run the handler for a request and build its response envelope.

        Args:
            request: The parsed request.

        Returns:
            A success or failure Response. Never raises for handler errors.
        """
        method = self._registry.resolve(request.method)
        if method is None:
            logger.warning(
                "Widget called unsupported method '%s' (id=%s)", request.method, request.id
            )
            return _failure(
                request.id, UnsupportedMethodError(f"Method not supported: {request.method}")
            )

        deadline: asyncio.Timeout | None = None
        try:
            call = self._registry.invoke(method, request.params)
            if self._handler_timeout is None:
                result = await call
            else:
                async with asyncio.timeout(self._handler_timeout) as deadline:
                    result = await call
            return make_success_response(request.id, result)

        except TimeoutError as e:
            if deadline is None or not deadline.expired():
                # Raised by the handler itself, not by our deadline
                logger.error("Handler for '%s' raised TimeoutError", request.method)
                return _failure(request.id, e)
            logger.warning(
                "Handler for '%s' (id=%s) timed out after %ss",
                request.method,
                request.id,
                self._handler_timeout,
            )
            return make_error_response(
                request.id,
                INTERNAL_ERROR,
                f"Request timed out after {self._handler_timeout}s",
            )

        except RpcError as e:
            logger.debug("Request %s failed: %s", request.id, e.message)
            return _failure(request.id, e)

        except Exception as e:
            logger.error(
                "Unexpected error dispatching method '%s': %s",
                request.method,
                e,
                exc_info=True,
            )
            return _failure(request.id, e)

    async def _serve(self, request: Request) -> None:
        response = await self.dispatch(request)
        await self._deliver(response)

    async def _deliver(self, response: Response) -> None:
        window = self._validator.window
        try:
            delivered = await self._transport.post(window, serialize_response(response))
        except SerializationError as e:
            logger.error("Response %s could not be serialized: %s", response.id, e.message)
            fallback = make_error_response(
                response.id, INTERNAL_ERROR, "Handler result is not JSON-serializable"
            )
            delivered = await self._transport.post(window, serialize_response(fallback))

        if not delivered:
            logger.debug("Response %s dropped", response.id)

    def close(self) -> None:
        """Stop accepting messages and cancel in-flight requests.

        Cancelled requests get no response. Idempotent.
        """
        if self._closed:
            return
        self._closed = True
        for task in list(self._tasks):
            task.cancel()

    async def wait_closed(self) -> None:
        """Wait for cancelled requests to unwind."""
        tasks = list(self._tasks)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


def _failure(request_id: str, exc: BaseException) -> Response:
    error: dict[str, Any] = error_from_exception(exc)
    return Response(id=request_id, success=False, error=error)

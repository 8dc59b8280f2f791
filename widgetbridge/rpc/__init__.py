"""Wallet RPC bridge between a host and its embedded widget.

The widget posts requests over a message channel; the host answers each one
with exactly one correlated response.

Example usage:
    widgetbridge serve --port 8787
    # widget side, over a WebSocket:
    -> {"id":"1","method":"eth_chainId"}
    <- {"id":"1","success":true,"data":"0x1"}
"""

from widgetbridge.rpc.bridge import WidgetBridge
from widgetbridge.rpc.dispatcher import Dispatcher
from widgetbridge.rpc.handlers import Handler, MethodRegistry, UnimplementedWallet, WalletBackend
from widgetbridge.rpc.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_IMPLEMENTED,
    UNSUPPORTED_METHOD,
    InvalidParamsError,
    MethodNotImplementedError,
    ParseError,
    RpcError,
    UnsupportedMethodError,
    is_request,
    make_error_response,
    make_success_response,
    parse_request,
    parse_response,
    serialize_request,
    serialize_response,
)
from widgetbridge.rpc.state import SessionState
from widgetbridge.rpc.transport import (
    LocalWindow,
    MessageChannel,
    MessageEvent,
    TransportAdapter,
    Window,
)
from widgetbridge.rpc.types import PROTOCOL_VERSION, Request, Response, RpcMethod
from widgetbridge.rpc.validator import MessageValidator
from widgetbridge.rpc.websocket import BridgeServer, WebSocketWindow

__all__ = [
    # Types
    "PROTOCOL_VERSION",
    "Request",
    "Response",
    "RpcMethod",
    # Protocol functions (host side)
    "is_request",
    "parse_request",
    "serialize_response",
    "make_error_response",
    "make_success_response",
    # Protocol functions (widget side)
    "serialize_request",
    "parse_response",
    # Error codes
    "UNSUPPORTED_METHOD",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "METHOD_NOT_IMPLEMENTED",
    # Exceptions
    "ParseError",
    "RpcError",
    "InvalidParamsError",
    "UnsupportedMethodError",
    "MethodNotImplementedError",
    # Components
    "SessionState",
    "Handler",
    "MethodRegistry",
    "WalletBackend",
    "UnimplementedWallet",
    "MessageValidator",
    "Dispatcher",
    "WidgetBridge",
    # Transport
    "Window",
    "LocalWindow",
    "MessageEvent",
    "MessageChannel",
    "TransportAdapter",
    "WebSocketWindow",
    "BridgeServer",
]

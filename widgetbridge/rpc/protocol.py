"""Widget RPC protocol parsing and envelope construction.

Wire format (flat framing):
    request:  {"id": str, "method": str, "params"?: [...]}
    success:  {"id": str, "success": true, "data": any}
    failure:  {"id": str, "success": false, "error": {"code": int, "message": str, "data"?: any}}
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from widgetbridge.core.errors import BridgeError
from widgetbridge.rpc.types import Request, Response


class ParseError(BridgeError):
    """Raised when an inbound payload is not an RPC request."""


# Error codes (EIP-1193 provider errors and EIP-1474 JSON-RPC errors)
UNSUPPORTED_METHOD = 4200
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
METHOD_NOT_IMPLEMENTED = -32004


class RpcError(BridgeError):
    """Handler failure that is reported to the widget with a specific code."""

    code = INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.data = data
        super().__init__(message)


class InvalidParamsError(RpcError):
    """Raised when method parameters are invalid."""

    code = INVALID_PARAMS


class UnsupportedMethodError(RpcError):
    """Raised when the widget calls a method the host does not offer."""

    code = UNSUPPORTED_METHOD


class MethodNotImplementedError(RpcError):
    """Raised by wallet operations the host declares but does not provide."""

    code = METHOD_NOT_IMPLEMENTED


def is_request(data: Any) -> bool:
    """Return True if data has the shape of an RPC request.

    The message channel also carries unrelated traffic, so this is a
    membership test, not a validation step that reports errors.
    """
    if not isinstance(data, Mapping):
        return False
    if not isinstance(data.get("id"), str):
        return False
    if not isinstance(data.get("method"), str):
        return False
    return "params" not in data or isinstance(data["params"], list)


def parse_request(data: Any) -> Request:
    """Build a Request from a decoded inbound payload.

    Args:
        data: Decoded message payload.

    Returns:
        A parsed Request. Missing params become an empty list.

    Raises:
        ParseError: If data is not shaped like a request.
    """
    if not is_request(data):
        raise ParseError("Payload is not an RPC request")
    return Request(
        id=data["id"],
        method=data["method"],
        params=list(data.get("params") or []),
    )


def make_error(code: int, message: str, data: Any = None) -> dict[str, Any]:
    """Create an error object for a failure envelope."""
    error: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if data is not None:
        error["data"] = data
    return error


def error_from_exception(exc: BaseException) -> dict[str, Any]:
    """Convert a handler exception into an error object.

    RpcError keeps its own code and data; other BridgeErrors become internal
    errors with their message; anything else is labelled with its type.
    """
    if isinstance(exc, RpcError):
        return make_error(exc.code, exc.message, exc.data)
    if isinstance(exc, BridgeError):
        return make_error(INTERNAL_ERROR, exc.message)
    return make_error(INTERNAL_ERROR, f"Internal error: {type(exc).__name__}: {exc}")


def make_success_response(request_id: str, data: Any) -> Response:
    """Create a success response."""
    return Response(id=request_id, success=True, data=data)


def make_error_response(
    request_id: str,
    code: int,
    message: str,
    data: Any = None,
) -> Response:
    """Create a failure response."""
    return Response(
        id=request_id,
        success=False,
        error=make_error(code, message, data),
    )


def serialize_response(response: Response) -> dict[str, Any]:
    """Convert a Response to its wire dict.

    Exactly one of "data" or "error" is present.
    """
    data: dict[str, Any] = {
        "id": response.id,
        "success": response.success,
    }
    if response.success:
        data["data"] = response.data
    else:
        data["error"] = response.error
    return data


# === Widget-side functions ===


def serialize_request(request: Request) -> dict[str, Any]:
    """Convert a Request to its wire dict. Empty params are omitted."""
    data: dict[str, Any] = {
        "id": request.id,
        "method": request.method,
    }
    if request.params:
        data["params"] = request.params
    return data


def parse_response(data: Any) -> Response:
    """Build a Response from a decoded outbound payload.

    Raises:
        ParseError: If data is not a well-formed response envelope.
    """
    if not isinstance(data, Mapping):
        raise ParseError("Response must be an object")
    if not isinstance(data.get("id"), str):
        raise ParseError("Response must have a string 'id' field")

    success = data.get("success")
    if not isinstance(success, bool):
        raise ParseError("Response must have a boolean 'success' field")

    has_data = "data" in data
    has_error = "error" in data
    if has_data and has_error:
        raise ParseError("Response cannot have both 'data' and 'error'")
    if success and not has_data:
        raise ParseError("Success response must have 'data'")
    if not success:
        error = data.get("error")
        if not isinstance(error, Mapping) or "code" not in error or "message" not in error:
            raise ParseError("Failure response must have an error with 'code' and 'message'")
        return Response(id=data["id"], success=False, error=dict(error))

    return Response(id=data["id"], success=True, data=data["data"])

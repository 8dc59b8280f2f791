"""Unit tests for widget RPC envelope parsing and construction."""

import pytest

from widgetbridge.core.errors import BridgeError
from widgetbridge.rpc.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_IMPLEMENTED,
    UNSUPPORTED_METHOD,
    InvalidParamsError,
    MethodNotImplementedError,
    ParseError,
    UnsupportedMethodError,
    error_from_exception,
    is_request,
    make_error_response,
    make_success_response,
    parse_request,
    parse_response,
    serialize_request,
    serialize_response,
)
from widgetbridge.rpc.types import Request, Response


class TestIsRequest:
    """Tests for the request shape predicate."""

    def test_minimal_request(self):
        assert is_request({"id": "1", "method": "eth_chainId"})

    def test_request_with_params(self):
        assert is_request({"id": "1", "method": "eth_sendTransaction", "params": [{}]})

    def test_empty_params(self):
        assert is_request({"id": "1", "method": "eth_accounts", "params": []})

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            "eth_chainId",
            42,
            ["1", "eth_chainId"],
            {},
            {"id": "1"},
            {"method": "eth_chainId"},
            {"id": 1, "method": "eth_chainId"},
            {"id": "1", "method": None},
            {"id": "1", "method": "eth_chainId", "params": {"a": 1}},
            {"id": "1", "method": "eth_chainId", "params": "0x1"},
            {"id": "1", "method": "eth_chainId", "params": None},
            {"id": "1", "args": {"method": "eth_chainId"}},
        ],
    )
    def test_rejects_other_shapes(self, payload):
        assert not is_request(payload)


class TestParseRequest:
    """Tests for parse_request."""

    def test_missing_params_become_empty(self):
        request = parse_request({"id": "abc", "method": "eth_accounts"})
        assert request == Request(id="abc", method="eth_accounts", params=[])

    def test_params_are_copied(self):
        params = [{"chainId": "0x5"}]
        request = parse_request({"id": "1", "method": "wallet_switchEthereumChain", "params": params})
        assert request.params == params
        assert request.params is not params

    def test_extra_fields_ignored(self):
        request = parse_request({"id": "1", "method": "eth_chainId", "jsonrpc": "2.0"})
        assert request.method == "eth_chainId"

    def test_invalid_raises(self):
        with pytest.raises(ParseError):
            parse_request({"id": 1, "method": "eth_chainId"})


class TestEnvelopes:
    """Tests for response construction and serialization."""

    def test_success_envelope(self):
        response = make_success_response("1", "0x1")
        assert serialize_response(response) == {"id": "1", "success": True, "data": "0x1"}

    def test_success_with_none_keeps_data_key(self):
        wire = serialize_response(make_success_response("1", None))
        assert wire == {"id": "1", "success": True, "data": None}

    def test_failure_envelope(self):
        response = make_error_response("7", INVALID_PARAMS, "bad", data={"chainId": "x"})
        assert serialize_response(response) == {
            "id": "7",
            "success": False,
            "error": {"code": INVALID_PARAMS, "message": "bad", "data": {"chainId": "x"}},
        }

    def test_failure_omits_empty_data(self):
        wire = serialize_response(make_error_response("7", INTERNAL_ERROR, "boom"))
        assert wire["error"] == {"code": INTERNAL_ERROR, "message": "boom"}
        assert "data" not in wire


class TestErrorFromException:
    """Tests for mapping exceptions to error objects."""

    def test_rpc_error_keeps_code(self):
        assert error_from_exception(InvalidParamsError("nope"))["code"] == INVALID_PARAMS
        assert error_from_exception(UnsupportedMethodError("x"))["code"] == UNSUPPORTED_METHOD
        assert (
            error_from_exception(MethodNotImplementedError("Not implemented."))
            == {"code": METHOD_NOT_IMPLEMENTED, "message": "Not implemented."}
        )

    def test_rpc_error_data(self):
        error = error_from_exception(InvalidParamsError("bad", data=[1]))
        assert error["data"] == [1]

    def test_bridge_error_is_internal(self):
        assert error_from_exception(BridgeError("state broke")) == {
            "code": INTERNAL_ERROR,
            "message": "state broke",
        }

    def test_other_exception_names_type(self):
        error = error_from_exception(KeyError("k"))
        assert error["code"] == INTERNAL_ERROR
        assert error["message"].startswith("Internal error: KeyError")


class TestWidgetSide:
    """Tests for the widget-side helpers."""

    def test_serialize_request_omits_empty_params(self):
        assert serialize_request(Request(id="1", method="eth_chainId")) == {
            "id": "1",
            "method": "eth_chainId",
        }

    def test_serialize_request_with_params(self):
        wire = serialize_request(Request(id="1", method="eth_estimateGas", params=[{"to": "0x0"}]))
        assert wire["params"] == [{"to": "0x0"}]
        assert is_request(wire)

    def test_parse_success_response(self):
        response = parse_response({"id": "1", "success": True, "data": ["0xabc"]})
        assert response == Response(id="1", success=True, data=["0xabc"])

    def test_parse_failure_response(self):
        response = parse_response(
            {"id": "1", "success": False, "error": {"code": 4200, "message": "nope"}}
        )
        assert response.success is False
        assert response.error == {"code": 4200, "message": "nope"}

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {"success": True, "data": 1},
            {"id": "1", "data": 1},
            {"id": "1", "success": True},
            {"id": "1", "success": True, "data": 1, "error": {}},
            {"id": "1", "success": False, "error": "boom"},
            {"id": "1", "success": False, "error": {"message": "boom"}},
        ],
    )
    def test_parse_response_rejects_malformed(self, payload):
        with pytest.raises(ParseError):
            parse_response(payload)

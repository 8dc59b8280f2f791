"""Wire types for the widget RPC protocol."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Bumped if the envelope shape ever changes. Not sent on the wire.
PROTOCOL_VERSION = 1


class RpcMethod(str, Enum):
    """The closed set of methods the host answers."""

    ETH_ACCOUNTS = "eth_accounts"
    ETH_CHAIN_ID = "eth_chainId"
    WALLET_SWITCH_ETHEREUM_CHAIN = "wallet_switchEthereumChain"
    ETH_SEND_TRANSACTION = "eth_sendTransaction"
    ETH_ESTIMATE_GAS = "eth_estimateGas"


@dataclass
class Request:
    """Inbound RPC request from the widget.

    Attributes:
        id: Caller-chosen correlation token, echoed verbatim in the response.
        method: Name of the method to invoke.
        params: Positional parameters. Absent on the wire means empty.
    """

    id: str
    method: str
    params: list[Any] = field(default_factory=list)


@dataclass
class Response:
    """Outbound RPC response.

    Attributes:
        id: Correlation token from the original request.
        success: True if the handler returned a value.
        data: Handler result (success only).
        error: Error object with code and message (failure only).
    """

    id: str
    success: bool
    data: Any = None
    error: dict[str, Any] | None = None

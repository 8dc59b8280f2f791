"""Method registry and handlers for the widget RPC surface."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Coroutine, Mapping, Sequence
from typing import Any, Protocol

from widgetbridge.core.errors import HexDecodeError
from widgetbridge.core.hexutil import hex_to_int, to_hex
from widgetbridge.rpc.protocol import InvalidParamsError, MethodNotImplementedError
from widgetbridge.rpc.state import SessionState
from widgetbridge.rpc.types import RpcMethod

logger = logging.getLogger(__name__)

# Type alias for handler functions; params are spread positionally
Handler = Callable[..., Coroutine[Any, Any, Any]]


class WalletBackend(Protocol):
    """Signing and broadcasting operations owned by the host's wallet.

    The transaction is passed through as the widget sent it (None when
    absent). Backends validate its shape and raise InvalidParamsError.
    """

    async def send_transaction(self, transaction: Any) -> str:
        """Sign and submit a transaction, returning its hash."""
        ...

    async def estimate_gas(self, transaction: Any, block: Any = None) -> str:
        """Estimate gas for a transaction, returning a hex quantity."""
        ...


class UnimplementedWallet:
    """Wallet backend for hosts that do not sign transactions."""

    async def send_transaction(self, transaction: Any) -> str:
        raise MethodNotImplementedError("Not implemented.")

    async def estimate_gas(self, transaction: Any, block: Any = None) -> str:
        raise MethodNotImplementedError("Not implemented.")


class MethodRegistry:
    """Maps every RpcMethod to exactly one handler.

    The registry is fixed at construction. Overrides may replace built-in
    handlers but may not add names outside RpcMethod; construction fails if
    any method is left without a handler.
    """

    def __init__(
        self,
        state: SessionState,
        wallet: WalletBackend | None = None,
        overrides: Mapping[RpcMethod | str, Handler] | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            state: Session state the handlers read and write.
            wallet: Backend for transaction operations. Defaults to
                UnimplementedWallet.
            overrides: Replacement handlers keyed by method.

        Raises:
            ValueError: If an override names an unknown method, or a method
                has no handler.
        """
        self._state = state
        self._wallet: WalletBackend = wallet or UnimplementedWallet()
        self._handlers: dict[RpcMethod, Handler] = {
            RpcMethod.ETH_ACCOUNTS: self._handle_accounts,
            RpcMethod.ETH_CHAIN_ID: self._handle_chain_id,
            RpcMethod.WALLET_SWITCH_ETHEREUM_CHAIN: self._handle_switch_chain,
            RpcMethod.ETH_SEND_TRANSACTION: self._handle_send_transaction,
            RpcMethod.ETH_ESTIMATE_GAS: self._handle_estimate_gas,
        }

        for name, handler in (overrides or {}).items():
            try:
                method = RpcMethod(name)
            except ValueError:
                raise ValueError(f"Cannot register unknown method: {name!r}") from None
            self._handlers[method] = handler

        missing = [m.value for m in RpcMethod if m not in self._handlers]
        if missing:
            raise ValueError(f"No handler registered for: {', '.join(missing)}")

    @property
    def state(self) -> SessionState:
        """The session state shared by all handlers."""
        return self._state

    @property
    def methods(self) -> list[str]:
        """Names of all registered methods."""
        return [m.value for m in self._handlers]

    def resolve(self, name: str) -> RpcMethod | None:
        """Look up a method by wire name. Returns None if not registered."""
        try:
            return RpcMethod(name)
        except ValueError:
            return None

    def invoke(self, method: RpcMethod, params: Sequence[Any]) -> Coroutine[Any, Any, Any]:
        """Start a handler call with params spread positionally.

        The arity check happens here so mismatches are reported as invalid
        params rather than as internal TypeErrors.

        Raises:
            InvalidParamsError: If params don't fit the handler's signature.
        """
        handler = self._handlers[method]
        try:
            inspect.signature(handler).bind(*params)
        except TypeError as e:
            raise InvalidParamsError(f"Invalid params for {method.value}: {e}") from e
        return handler(*params)

    async def _handle_accounts(self) -> list[str]:
        return [self._state.account]

    async def _handle_chain_id(self) -> str:
        return to_hex(self._state.chain_id)

    async def _handle_switch_chain(self, params: Any) -> None:
        """Handle wallet_switchEthereumChain.

        Args:
            params: Object with a hex-prefixed "chainId" field.

        Returns:
            None on success.

        Raises:
            InvalidParamsError: If params is not an object or chainId can't
                be decoded. State is left unchanged.
        """
        if not isinstance(params, Mapping):
            raise InvalidParamsError(
                f"Expected object with chainId, got: {type(params).__name__}"
            )
        if "chainId" not in params:
            raise InvalidParamsError("Missing required parameter: chainId")

        raw = params["chainId"]
        try:
            chain_id = hex_to_int(raw)
        except HexDecodeError as e:
            raise InvalidParamsError(e.message, data={"chainId": raw}) from e

        # Mutate before any await so concurrent calls never interleave here
        previous = self._state.chain_id
        self._state.set_chain_id(chain_id)
        logger.info("Switched chain %d -> %d", previous, chain_id)
        return None

    async def _handle_send_transaction(self, transaction: Any = None, *_extra: Any) -> str:
        return await self._wallet.send_transaction(_detach(transaction))

    async def _handle_estimate_gas(self, transaction: Any = None, block: Any = None) -> str:
        # block is the optional EIP-1474 block tag, e.g. "latest"
        return await self._wallet.estimate_gas(_detach(transaction), block)


def _detach(transaction: Any) -> Any:
    if isinstance(transaction, Mapping):
        return dict(transaction)
    return transaction

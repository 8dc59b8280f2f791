"""Mutable session state shared by all RPC handlers."""

from __future__ import annotations

from typing import Any

from widgetbridge.config.schema import SessionConfig


class SessionState:
    """Active account and chain id for one bridge lifetime.

    All access happens on the event loop thread and every mutation is
    synchronous, so no lock is needed. Only wallet_switchEthereumChain
    writes chain_id; nothing writes account after construction.
    """

    def __init__(self, account: str, chain_id: int) -> None:
        self._account = account
        self._chain_id = self._check_chain_id(chain_id)

    @classmethod
    def from_config(cls, config: SessionConfig) -> SessionState:
        """Seed state from configuration."""
        return cls(account=config.account, chain_id=config.chain_id)

    @property
    def account(self) -> str:
        """The single active wallet address."""
        return self._account

    @property
    def chain_id(self) -> int:
        """The active chain id."""
        return self._chain_id

    def set_chain_id(self, chain_id: int) -> None:
        """Overwrite the active chain id.

        Raises:
            ValueError: If chain_id is not a non-negative int.
        """
        self._chain_id = self._check_chain_id(chain_id)

    def snapshot(self) -> dict[str, Any]:
        """Return a copy of the current state."""
        return {"account": self._account, "chain_id": self._chain_id}

    @staticmethod
    def _check_chain_id(chain_id: int) -> int:
        if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id < 0:
            raise ValueError(f"chain_id must be a non-negative int, got: {chain_id!r}")
        return chain_id

    def __repr__(self) -> str:
        return f"SessionState(account={self._account!r}, chain_id={self._chain_id})"

"""Shared pytest fixtures for widgetbridge tests."""

import asyncio
from typing import Any

import pytest

from widgetbridge.config.schema import Config
from widgetbridge.rpc.protocol import MethodNotImplementedError
from widgetbridge.rpc.transport import LocalWindow, MessageChannel


class SlowWallet:
    """Wallet backend that fails like the default one, after a delay."""

    def __init__(self, delay: float = 0.1) -> None:
        self.delay = delay
        self.calls: list[Any] = []

    async def send_transaction(self, transaction: Any) -> str:
        self.calls.append(transaction)
        await asyncio.sleep(self.delay)
        raise MethodNotImplementedError("Not implemented.")

    async def estimate_gas(self, transaction: Any, block: Any = None) -> str:
        self.calls.append(transaction)
        await asyncio.sleep(self.delay)
        return "0x5208"


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def channel() -> MessageChannel:
    return MessageChannel()


@pytest.fixture
def widget() -> LocalWindow:
    return LocalWindow(origin="http://kiln.localhost:8081")


@pytest.fixture
def slow_wallet() -> SlowWallet:
    return SlowWallet()

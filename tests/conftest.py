"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import Callable, Union

import httpx
import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("MASTER_KEY", None)
os.environ.pop("ETH_RPC_URLS", None)

from ethwallet.config import get_settings
from ethwallet.crypto import generate_master_key
from ethwallet.services.balance_resolver import get_balance_resolver
from ethwallet.storage import EncryptedFileStore, WalletStorage

# Endpoint behaviour: "fail" (HTTP 500), "timeout" (hangs), "error" (JSON-RPC
# error object), "garbage" (malformed result) or an int balance in wei.
Behaviour = Union[str, int, Callable[[httpx.Request], httpx.Response]]


@pytest.fixture(autouse=True)
def fresh_settings():
    """Clear cached settings and resolver around each test."""
    get_settings.cache_clear()
    get_balance_resolver.cache_clear()
    yield
    get_settings.cache_clear()
    get_balance_resolver.cache_clear()


class FakeRPC:
    """httpx transport that answers eth_getBalance per endpoint host."""

    def __init__(self, behaviours: dict[str, Behaviour], delay: float = 0.0):
        self.behaviours = behaviours
        self.delay = delay
        self.calls: list[str] = []
        self.transport = httpx.MockTransport(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.calls.append(host)
        behaviour = self.behaviours.get(host, "fail")

        if self.delay:
            await asyncio.sleep(self.delay)

        if callable(behaviour):
            return behaviour(request)
        if behaviour == "timeout":
            await asyncio.sleep(60)
        if behaviour == "fail":
            return httpx.Response(500, text="internal error")
        if behaviour == "error":
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "rate limited"}},
            )
        if behaviour == "garbage":
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": None})
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": hex(behaviour)})


@pytest.fixture
def fake_rpc() -> Callable[..., FakeRPC]:
    """Factory for FakeRPC transports."""
    return FakeRPC


@pytest.fixture
def endpoints() -> list[str]:
    """Five fake RPC endpoints in priority order."""
    return [f"https://rpc{i}.test" for i in range(1, 6)]


@pytest.fixture
def master_key() -> str:
    return generate_master_key()


@pytest.fixture
def wallet_storage(tmp_path, master_key) -> WalletStorage:
    """WalletStorage backed by an encrypted file in a temp dir."""
    return WalletStorage(EncryptedFileStore(tmp_path / "wallet.store", master_key))

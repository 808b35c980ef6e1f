"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio
import os

# ---------------------------------------------------------------------------
# Shared secrets must be set before nftgate.api.deps is imported, since it
# reads them at module-load time.
# ---------------------------------------------------------------------------
os.environ.setdefault("BOT_API_KEY", "test-bot-key-for-pytest-only")
os.environ.setdefault("FRONTEND_API_KEY", "test-frontend-key-for-pytest-only")

import pytest  # noqa: E402

from nftgate.api import deps  # noqa: E402
from nftgate.config import NftGateConfig  # noqa: E402
from nftgate.core.models import StakerInfo  # noqa: E402
from nftgate.core.relay import RoleUpdateRelay  # noqa: E402
from nftgate.core.sessions import SessionStore  # noqa: E402


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeChain:
    """In-memory chain capability keyed by lowercase address."""

    def __init__(self) -> None:
        self.balances: dict[str, int] = {}
        self.staked: dict[str, tuple[int, ...]] = {}
        self.error: Exception | None = None
        self.staker_error: Exception | None = None
        self.delay: float = 0
        self.balance_delay: float = 0
        self.staker_delay: float = 0
        self.calls: list[tuple[str, str]] = []
        self.cancelled: list[str] = []

    def set_holdings(self, address: str, balance: int, staked: tuple[int, ...] = ()) -> None:
        self.balances[address.lower()] = balance
        self.staked[address.lower()] = tuple(staked)

    async def _wait(self, kind: str, delay: float) -> None:
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self.cancelled.append(kind)
            raise

    async def get_nft_balance(self, address: str) -> int:
        self.calls.append(("balance", address))
        if self.delay or self.balance_delay:
            await self._wait("balance", self.delay or self.balance_delay)
        if self.error is not None:
            raise self.error
        return self.balances.get(address.lower(), 0)

    async def get_staker_info(self, address: str) -> StakerInfo:
        self.calls.append(("staker", address))
        if self.delay or self.staker_delay:
            await self._wait("staker", self.delay or self.staker_delay)
        if self.staker_error is not None:
            raise self.staker_error
        return StakerInfo(
            staked_token_ids=self.staked.get(address.lower(), ()),
            total_points=42,
            tier=2,
            is_minter=False,
        )

    async def is_connected(self) -> bool:
        return True


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> SessionStore:
    return SessionStore(clock=clock)


@pytest.fixture
def relay(clock) -> RoleUpdateRelay:
    return RoleUpdateRelay(clock=clock)


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain()


@pytest.fixture
def test_config() -> NftGateConfig:
    return NftGateConfig(
        nft_contract_address="0x485242262f1e367144fe432ba858f9ef6f491334",
        staking_contract_address="0xdDbcC239527Dedd5E0c761042ef02A7951cEC315",
        guild_id=111,
        verified_role_id=1001,
        elite_role_id=1010,
        chain_timeout_seconds=0.5,
    )


@pytest.fixture
def client(store, relay, chain, test_config):
    """FastAPI TestClient wired to fresh per-test store, relay and fake chain."""
    from fastapi.testclient import TestClient

    from nftgate.api.main import app

    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_relay] = lambda: relay
    app.dependency_overrides[deps.get_chain] = lambda: chain
    app.dependency_overrides[deps.get_config] = lambda: test_config
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


# Whatever keys deps actually loaded (the environment may pre-set them).
TEST_BOT_KEY = deps.BOT_API_KEY
TEST_FRONTEND_KEY = deps.FRONTEND_API_KEY


def auth(key: str | None = None) -> dict:
    key = key or TEST_FRONTEND_KEY
    return {"x-api-key": key}

"""
tests/test_dashboard.py — Dashboard Aggregation Tests
======================================================
"""

from __future__ import annotations

import pytest

from nftgate.constants import MS_PER_HOUR
from nftgate.core.dashboard import build_dashboard, nft_bucket
from nftgate.core.models import WalletRecord


@pytest.mark.parametrize(
    "count, bucket",
    [(0, "small"), (5, "small"), (6, "medium"), (10, "medium"), (11, "large")],
)
def test_nft_bucket(count, bucket):
    assert nft_bucket(count) == bucket


class TestBuildDashboard:
    def test_empty_store(self, store, clock):
        data = build_dashboard(store, clock.now)
        assert data["activeSessions"] == 0
        assert data["totalNFTs"] == 0
        assert data["recentActivity"] == []
        assert len(data["sessionHistory"]) == 24
        assert all(point["count"] == 0 for point in data["sessionHistory"])
        assert data["status"]["online"] is True

    def test_counters_and_distribution(self, store, clock):
        alice = store.create_session("alice", "d1")
        store.upsert_wallet(alice, WalletRecord("0xA", 3, (1, 2)))
        store.upsert_wallet(alice, WalletRecord("0xB", 12))
        clock.advance(1_000)
        bob = store.create_session("bob", "d2")
        store.upsert_wallet(bob, WalletRecord("0xC", 7))
        store.create_session("carol")

        data = build_dashboard(store, clock.now, uptime_ms=500)

        assert data["activeSessions"] == 3
        assert data["discordUsers"] == 2
        assert data["verifiedWallets"] == 3
        assert data["totalNFTs"] == 5 + 12 + 7
        assert data["nftDistribution"] == {"small": 1, "medium": 1, "large": 1}
        assert [a["username"] for a in data["recentActivity"]] == ["bob", "alice"]
        assert data["recentActivity"][1]["details"] == "Verified 2 wallet(s)"
        assert data["status"]["uptime"] == 500

    def test_session_history_is_cumulative(self, store, clock):
        store.create_session("early")
        clock.advance(3 * MS_PER_HOUR)
        store.create_session("late")

        history = build_dashboard(store, clock.now)["sessionHistory"]
        assert history[-1] == {"timestamp": clock.now, "count": 2}
        assert history[-3]["count"] == 1
        assert history[0]["count"] == 0

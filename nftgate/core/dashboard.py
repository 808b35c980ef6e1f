"""
nftgate.core.dashboard — Summary Statistics
============================================

Read-only fold over the session store for the polling dashboard UI.
"""

from __future__ import annotations

from typing import Any

from nftgate.constants import (
    MS_PER_HOUR,
    NFT_BUCKET_MEDIUM_MAX,
    NFT_BUCKET_SMALL_MAX,
    RECENT_ACTIVITY_LIMIT,
    SESSION_HISTORY_HOURS,
)
from nftgate.core.sessions import SessionStore


def nft_bucket(count: int) -> str:
    if count <= NFT_BUCKET_SMALL_MAX:
        return "small"
    if count <= NFT_BUCKET_MEDIUM_MAX:
        return "medium"
    return "large"


def build_dashboard(store: SessionStore, now: int, uptime_ms: int = 0) -> dict[str, Any]:
    """Aggregate counters, NFT distribution, recent activity and history."""
    sessions = store.snapshot()

    total_nfts = 0
    verified_wallets = 0
    distribution = {"small": 0, "medium": 0, "large": 0}
    for session in sessions:
        verified_wallets += len(session.wallets)
        for wallet in session.wallets:
            total_nfts += wallet.total_nfts
            distribution[nft_bucket(wallet.total_nfts)] += 1

    with_wallets = sorted(
        (s for s in sessions if s.wallets),
        key=lambda s: s.created_at,
        reverse=True,
    )
    recent_activity = [
        {
            "username": s.username or "Unknown User",
            "action": "Wallet Verification",
            "timestamp": s.created_at,
            "details": f"Verified {len(s.wallets)} wallet(s)",
        }
        for s in with_wallets[:RECENT_ACTIVITY_LIMIT]
    ]

    # Cumulative count of sessions created at or before each hourly mark.
    session_history = []
    for hours_ago in range(SESSION_HISTORY_HOURS - 1, -1, -1):
        timestamp = now - hours_ago * MS_PER_HOUR
        count = sum(1 for s in sessions if s.created_at <= timestamp)
        session_history.append({"timestamp": timestamp, "count": count})

    return {
        "activeSessions": len(sessions),
        "discordUsers": store.discord_count,
        "totalNFTs": total_nfts,
        "verifiedWallets": verified_wallets,
        "nftDistribution": distribution,
        "recentActivity": recent_activity,
        "sessionHistory": session_history,
        "status": {
            "uptime": max(0, uptime_ms),
            "timestamp": now,
            "online": True,
        },
    }

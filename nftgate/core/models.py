"""
nftgate.core.models — In-Memory Records
========================================

Plain dataclasses for everything the core keeps in memory.  Timestamps are
integer milliseconds since the epoch, matching what the web dashboard and
the bot expect on the wire.  ``to_dict()`` renders the camelCase JSON shape.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "now_ms",
    "StakerInfo",
    "WalletRecord",
    "Session",
    "PendingRoleUpdate",
    "RoleUpdateOutcome",
    "VerificationResult",
]


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Chain capability results
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class StakerInfo:
    """Staking contract view for one address, normalized to native types."""

    staked_token_ids: tuple[int, ...] = ()
    total_points: int = 0
    tier: int = 0
    is_minter: bool = False


# ---------------------------------------------------------------------------
# Session + wallets
# ---------------------------------------------------------------------------
@dataclass(slots=True)
class WalletRecord:
    address: str
    nft_balance: int
    staked_token_ids: tuple[int, ...] = ()
    total_points: int = 0
    tier: int = 0
    is_minter: bool = False
    verified_at: int = field(default_factory=now_ms)

    @property
    def key(self) -> str:
        """Case-insensitive identity of the address within a session."""
        return self.address.lower()

    @property
    def total_nfts(self) -> int:
        return self.nft_balance + len(self.staked_token_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "nftBalance": self.nft_balance,
            "stakedTokenIds": list(self.staked_token_ids),
            "totalPoints": self.total_points,
            "tier": self.tier,
            "isMinter": self.is_minter,
            "totalNFTs": self.total_nfts,
            "verifiedAt": self.verified_at,
        }


@dataclass(slots=True, eq=False)
class Session:
    """One verification session.

    Compared by identity: the store hands out the same instance through both
    of its indexes, and callers rely on that.
    """

    id: str
    username: str
    discord_id: str | None = None
    wallets: list[WalletRecord] = field(default_factory=list)
    created_at: int = field(default_factory=now_ms)
    last_activity: int = 0

    def __post_init__(self) -> None:
        if not self.last_activity:
            self.last_activity = self.created_at

    @property
    def is_discord_connected(self) -> bool:
        return self.discord_id is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "discordId": self.discord_id,
            "username": self.username,
            "isDiscordConnected": self.is_discord_connected,
            "wallets": [w.to_dict() for w in self.wallets],
            "createdAt": self.created_at,
            "lastActivity": self.last_activity,
        }


# ---------------------------------------------------------------------------
# Relay queue
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class PendingRoleUpdate:
    user_id: str
    total_nfts: int
    enqueued_at: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "totalNFTs": self.total_nfts,
            "timestamp": self.enqueued_at,
        }


@dataclass(frozen=True, slots=True)
class RoleUpdateOutcome:
    """What the bot reported back for one user."""

    user_id: str
    success: bool
    roles: tuple[str, ...] = ()
    error: str | None = None
    completed_at: int = field(default_factory=now_ms)


# ---------------------------------------------------------------------------
# Workflow result
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class VerificationResult:
    session: Session
    wallet: WalletRecord

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "message": "Wallet verified successfully",
            "details": {
                "walletBalance": self.wallet.nft_balance,
                "stakedTokens": len(self.wallet.staked_token_ids),
                "totalBalance": self.wallet.total_nfts,
            },
            "session": self.session.to_dict(),
        }

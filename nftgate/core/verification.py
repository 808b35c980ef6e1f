"""
nftgate.core.verification — Wallet Verification Workflow
=========================================================

Given a session id and a candidate wallet address:

1. Resolve the session (:class:`SessionNotFound` if absent).
2. Query the chain for the held balance and the staker info concurrently,
   bounded by one timeout (:class:`ChainQueryTimeout`).
3. ``total = held + len(staked)``; zero holdings is a deliberate reject
   (:class:`NoHoldingsFound`) and leaves the session untouched.
4. Upsert the wallet record on the session (replace in place by address).
   A session expired or re-registered while the chain was queried fails
   with :class:`SessionNotFound` and nothing is enqueued.
5. Enqueue ``{userId: discordId, totalNFTs}`` on the relay so the bot can
   sync roles.  No Discord calls happen here.

The upsert and the enqueue are two separate steps.  If the process dies
between them the wallet stays verified with no pending role sync; the next
verification call re-enqueues it.
"""

from __future__ import annotations

import asyncio
import logging

from nftgate.chain.client import ChainQuery
from nftgate.constants import DEFAULT_CHAIN_TIMEOUT_SECONDS
from nftgate.core.models import StakerInfo, VerificationResult, WalletRecord
from nftgate.core.relay import RoleUpdateRelay
from nftgate.core.sessions import SessionStore
from nftgate.errors import (
    ChainQueryFailed,
    ChainQueryTimeout,
    NftGateError,
    NoHoldingsFound,
    SessionNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


class WalletVerifier:
    """Orchestrates session lookup → chain query → wallet upsert → relay."""

    def __init__(
        self,
        store: SessionStore,
        relay: RoleUpdateRelay,
        chain: ChainQuery,
        timeout: float = DEFAULT_CHAIN_TIMEOUT_SECONDS,
    ) -> None:
        self.store = store
        self.relay = relay
        self.chain = chain
        self.timeout = timeout

    async def verify(self, session_id: str, address: str) -> VerificationResult:
        address = (address or "").strip()
        if not address:
            raise ValidationError("Wallet address is required")

        session = self.store.get_by_id(session_id)
        if session is None:
            logger.warning("Wallet verification for unknown session %s", session_id)
            raise SessionNotFound(session_id)

        nft_balance, staker = await self._query_holdings(address)

        staked_count = len(staker.staked_token_ids)
        total = nft_balance + staked_count
        if total == 0:
            logger.info(
                "No holdings for %s on session %s (balance=%d, staked=%d)",
                address, session_id, nft_balance, staked_count,
            )
            raise NoHoldingsFound(nft_balance, staked_count)

        wallet = WalletRecord(
            address=address,
            nft_balance=nft_balance,
            staked_token_ids=staker.staked_token_ids,
            total_points=staker.total_points,
            tier=staker.tier,
            is_minter=staker.is_minter,
        )
        try:
            self.store.upsert_wallet(session, wallet)
        except SessionNotFound:
            logger.warning(
                "Session %s expired or was replaced during verification of %s",
                session_id, address,
            )
            raise

        if session.discord_id is not None:
            self.relay.enqueue(session.discord_id, wallet.total_nfts)
        else:
            logger.warning(
                "Session %s has no Discord id; skipping role update for %s",
                session_id, address,
            )

        return VerificationResult(session=session, wallet=wallet)

    async def _query_holdings(self, address: str) -> tuple[int, StakerInfo]:
        """Run both chain calls concurrently; either failing fails the pair."""
        tasks = [
            asyncio.ensure_future(self.chain.get_nft_balance(address)),
            asyncio.ensure_future(self.chain.get_staker_info(address)),
        ]
        try:
            balance, staker = await asyncio.wait_for(
                asyncio.gather(*tasks), timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Chain query for %s timed out after %gs", address, self.timeout)
            raise ChainQueryTimeout(self.timeout) from None
        except NftGateError:
            raise
        except Exception as exc:
            logger.warning("Chain query for %s failed: %s", address, exc)
            raise ChainQueryFailed(reason=str(exc)) from exc
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()

        return int(balance), staker

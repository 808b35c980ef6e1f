"""
nftgate.core.sessions — In-Memory Session Store
================================================

Authoritative table of :class:`Session` records, addressable by session id
and by Discord id.  Both indexes point at the **same** record instance, so
a mutation made through one lookup is visible through the other.

The store never performs I/O.  FastAPI runs sync endpoints on a thread pool,
so every table mutation is guarded by a single lock that is held only for
the in-memory update (never across a chain call).  Lookups on absent ids
return ``None``.
"""

from __future__ import annotations

import logging
import secrets
import threading
from collections.abc import Callable
from urllib.parse import unquote

from nftgate.core.models import Session, WalletRecord, now_ms
from nftgate.errors import SessionNotFound

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """128-bit random token, hex encoded."""
    return secrets.token_hex(16)


class SessionStore:
    """Dual-indexed session table (primary id + Discord id)."""

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._by_id: dict[str, Session] = {}
        self._by_discord_id: dict[str, Session] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------
    def create_session(
        self,
        username: str,
        discord_id: str | None = None,
        *,
        session_id: str | None = None,
    ) -> Session:
        """Create and index a new session.

        *session_id* lets the Discord webhook register an id the bot has
        already handed to the user; any earlier record under that id (or
        under the same Discord id) is replaced.
        """
        now = self._clock()
        session = Session(
            id=session_id or new_session_id(),
            username=unquote(username),
            discord_id=discord_id or None,
            created_at=now,
            last_activity=now,
        )
        with self._lock:
            previous = self._by_id.get(session.id)
            if previous is not None:
                self._unindex(previous)
            if session.discord_id is not None:
                stale = self._by_discord_id.get(session.discord_id)
                if stale is not None and stale is not previous:
                    self._by_id.pop(stale.id, None)
                self._by_discord_id[session.discord_id] = session
            self._by_id[session.id] = session
            total = len(self._by_id)

        logger.info(
            "Created session %s for %s (discord=%s, total=%d)",
            session.id, session.username, session.discord_id, total,
        )
        return session

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def get_by_id(self, session_id: str) -> Session | None:
        with self._lock:
            return self._by_id.get(session_id)

    def get_by_discord_id(self, discord_id: str) -> Session | None:
        with self._lock:
            return self._by_discord_id.get(discord_id)

    def snapshot(self) -> list[Session]:
        """Point-in-time list of every session (safe to iterate unlocked)."""
        with self._lock:
            return list(self._by_id.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)

    @property
    def discord_count(self) -> int:
        with self._lock:
            return len(self._by_discord_id)

    # -------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------
    def touch(self, session: Session) -> None:
        with self._lock:
            session.last_activity = self._clock()

    def upsert_wallet(self, session: Session, wallet: WalletRecord) -> WalletRecord:
        """Replace the wallet with the same address in place, or append it.

        Raises :class:`SessionNotFound` if *session* is no longer the record
        indexed under its id (expired or re-registered since it was looked up).
        """
        with self._lock:
            if self._by_id.get(session.id) is not session:
                raise SessionNotFound(session.id)
            for index, existing in enumerate(session.wallets):
                if existing.key == wallet.key:
                    session.wallets[index] = wallet
                    replaced = True
                    break
            else:
                session.wallets.append(wallet)
                replaced = False
            session.last_activity = self._clock()

        logger.info(
            "%s wallet %s on session %s (%d NFTs)",
            "Updated" if replaced else "Added",
            wallet.address, session.id, wallet.total_nfts,
        )
        return wallet

    def delete_session(self, session_id: str) -> bool:
        """Remove a session from both indexes.  Returns False if absent."""
        with self._lock:
            session = self._by_id.get(session_id)
            if session is None:
                return False
            self._unindex(session)
        return True

    def expire(self, session_id: str, cutoff: int) -> bool:
        """Delete *session_id* only if it has been idle since before *cutoff*.

        Re-checks ``last_activity`` under the lock so a session touched after
        the sweeper took its snapshot survives.
        """
        with self._lock:
            session = self._by_id.get(session_id)
            if session is None or session.last_activity >= cutoff:
                return False
            self._unindex(session)
        return True

    def _unindex(self, session: Session) -> None:
        # Caller holds the lock.
        self._by_id.pop(session.id, None)
        if session.discord_id is not None and self._by_discord_id.get(session.discord_id) is session:
            del self._by_discord_id[session.discord_id]

"""
nftgate.core.relay — Pending Role-Update Mailbox
=================================================

Decouples wallet verification (API process) from Discord role mutation
(bot process).  The API enqueues the latest NFT total per user; the bot
drains the whole mailbox on each poll, applies roles, and reports back.

Per-user state machine::

    absent ──enqueue──▶ pending ──drain_all──▶ (gone)

Later enqueues for the same user overwrite the pending entry (only the
latest total matters).  Drained entries are gone even if the bot fails to
apply them; a fresh wallet verification re-enqueues.  Completion reports
are kept in a small ring for observability and never requeue.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Sequence

from nftgate.core.models import PendingRoleUpdate, RoleUpdateOutcome, now_ms

logger = logging.getLogger(__name__)

DEFAULT_OUTCOME_CAPACITY = 500


class RoleUpdateRelay:
    """Keyed mailbox of :class:`PendingRoleUpdate` entries."""

    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        outcome_capacity: int = DEFAULT_OUTCOME_CAPACITY,
    ) -> None:
        self._clock = clock
        self._pending: dict[str, PendingRoleUpdate] = {}
        self._outcomes: deque[RoleUpdateOutcome] = deque(maxlen=outcome_capacity)
        self._lock = threading.Lock()

    def enqueue(self, user_id: str, total_nfts: int) -> PendingRoleUpdate:
        update = PendingRoleUpdate(
            user_id=user_id,
            total_nfts=total_nfts,
            enqueued_at=self._clock(),
        )
        with self._lock:
            # Re-insert so dict order follows the latest enqueue.
            replaced = self._pending.pop(user_id, None) is not None
            self._pending[user_id] = update
        logger.info(
            "Queued role update for %s: %d NFTs%s",
            user_id, total_nfts, " (replaced pending)" if replaced else "",
        )
        return update

    def drain_all(self) -> list[PendingRoleUpdate]:
        """Return every pending entry and clear the mailbox atomically."""
        with self._lock:
            updates = list(self._pending.values())
            self._pending.clear()
        if updates:
            logger.info("Drained %d pending role update(s)", len(updates))
        return updates

    def complete(
        self,
        user_id: str,
        success: bool,
        *,
        roles: Sequence[str] | None = None,
        error: str | None = None,
    ) -> RoleUpdateOutcome:
        """Record the bot's outcome for *user_id* and drop any pending entry."""
        outcome = RoleUpdateOutcome(
            user_id=user_id,
            success=success,
            roles=tuple(roles or ()),
            error=error,
            completed_at=self._clock(),
        )
        with self._lock:
            self._pending.pop(user_id, None)
            self._outcomes.append(outcome)

        if success:
            logger.info("Role update completed for user %s: %s", user_id, list(outcome.roles))
        else:
            logger.error("Role update failed for user %s: %s", user_id, error)
        return outcome

    def pending(self, user_id: str) -> PendingRoleUpdate | None:
        with self._lock:
            return self._pending.get(user_id)

    def recent_outcomes(self, limit: int = 50) -> list[RoleUpdateOutcome]:
        with self._lock:
            outcomes = list(self._outcomes)
        return outcomes[-limit:] if limit else outcomes

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

"""
nftgate.api.routes.dashboard — Dashboard & debug endpoints
===========================================================
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends

from nftgate.api.deps import get_relay, get_store, require_api_key
from nftgate.core.dashboard import build_dashboard
from nftgate.core.models import now_ms
from nftgate.core.relay import RoleUpdateRelay
from nftgate.core.sessions import SessionStore

router = APIRouter(tags=["dashboard"], dependencies=[Depends(require_api_key)])

_STARTED = time.monotonic()


def uptime_ms() -> int:
    return int((time.monotonic() - _STARTED) * 1000)


@router.get("/dashboard")
def get_dashboard(store: SessionStore = Depends(get_store)):
    """Summary counters for the polling dashboard UI."""
    return build_dashboard(store, now_ms(), uptime_ms())


@router.get("/debug/sessions")
def debug_sessions(
    store: SessionStore = Depends(get_store),
    relay: RoleUpdateRelay = Depends(get_relay),
):
    sessions = store.snapshot()
    return {
        "totalSessions": len(sessions),
        "sessions": [s.to_dict() for s in sessions],
        "pendingRoleUpdates": len(relay),
        "recentOutcomes": [
            {
                "userId": o.user_id,
                "success": o.success,
                "roles": list(o.roles),
                "error": o.error,
                "completedAt": o.completed_at,
            }
            for o in relay.recent_outcomes()
        ],
    }

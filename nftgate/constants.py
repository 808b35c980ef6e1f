"""
nftgate.constants — Shared Constants
=====================================

Single source of truth for timing defaults, the holder role thresholds and
the dashboard bucketing.  Import from here instead of duplicating values in
the API, the bot and the core.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Timing defaults (overridable in config.yaml)
# ---------------------------------------------------------------------------
DEFAULT_SESSION_TIMEOUT_HOURS = 24
DEFAULT_SWEEP_INTERVAL_MINUTES = 60
DEFAULT_CHAIN_TIMEOUT_SECONDS = 12.0
DEFAULT_POLL_INTERVAL_SECONDS = 30

MS_PER_HOUR = 60 * 60 * 1000
SESSION_TIMEOUT_MS = DEFAULT_SESSION_TIMEOUT_HOURS * MS_PER_HOUR

# ---------------------------------------------------------------------------
# Holder role thresholds (total NFTs = held + staked)
# ---------------------------------------------------------------------------
VERIFIED_ROLE_THRESHOLD = 1
ELITE_ROLE_THRESHOLD = 10

# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
NFT_BUCKET_SMALL_MAX = 5
NFT_BUCKET_MEDIUM_MAX = 10
RECENT_ACTIVITY_LIMIT = 10
SESSION_HISTORY_HOURS = 24

# Header carrying the shared secret on every /api request
API_KEY_HEADER = "x-api-key"

"""
nftgate.config — YAML Configuration Loader
===========================================

Reads ``config.yaml`` for the non-secret settings shared by the API and the
bot: contract addresses, timeouts, the guild and its holder roles.  Secrets
(``RPC_URL``, API keys, ``DISCORD_TOKEN``) stay in the environment.

Usage::

    from nftgate.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.nft_contract_address)
    print(cfg.verified_role_id)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from nftgate.constants import (
    DEFAULT_CHAIN_TIMEOUT_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_SESSION_TIMEOUT_HOURS,
    DEFAULT_SWEEP_INTERVAL_MINUTES,
)


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class NftGateConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    # Chain
    nft_contract_address: str
    staking_contract_address: str

    # Discord
    guild_id: int
    verified_role_id: int
    elite_role_id: int

    # Bot → API relay
    api_base_url: str = "http://localhost:3001"
    poll_interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS

    # Timing
    chain_timeout_seconds: float = DEFAULT_CHAIN_TIMEOUT_SECONDS
    session_timeout_hours: float = DEFAULT_SESSION_TIMEOUT_HOURS
    sweep_interval_minutes: float = DEFAULT_SWEEP_INTERVAL_MINUTES

    @property
    def session_timeout_ms(self) -> int:
        return int(self.session_timeout_hours * 60 * 60 * 1000)

    @property
    def sweep_interval_seconds(self) -> float:
        return self.sweep_interval_minutes * 60


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> NftGateConfig:
    """Read *path* and return a :class:`NftGateConfig` instance.

    Parameters
    ----------
    path:
        Filesystem path to the YAML configuration file.
        Defaults to ``config.yaml`` in the current working directory.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    KeyError
        If a required key is missing from the YAML file.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    return NftGateConfig(
        nft_contract_address=raw["nft_contract_address"],
        staking_contract_address=raw["staking_contract_address"],
        guild_id=int(raw["guild_id"]),
        verified_role_id=int(raw["verified_role_id"]),
        elite_role_id=int(raw["elite_role_id"]),
        api_base_url=str(raw.get("api_base_url", "http://localhost:3001")).rstrip("/"),
        poll_interval_seconds=int(
            raw.get("poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS)
        ),
        chain_timeout_seconds=float(
            raw.get("chain_timeout_seconds", DEFAULT_CHAIN_TIMEOUT_SECONDS)
        ),
        session_timeout_hours=float(
            raw.get("session_timeout_hours", DEFAULT_SESSION_TIMEOUT_HOURS)
        ),
        sweep_interval_minutes=float(
            raw.get("sweep_interval_minutes", DEFAULT_SWEEP_INTERVAL_MINUTES)
        ),
    )

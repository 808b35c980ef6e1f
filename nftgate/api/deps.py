"""
nftgate.api.deps — FastAPI dependency injection
=================================================

One store, one relay and one chain client per process, handed to routes
through ``Depends`` so tests can swap them with ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging
import os
import secrets
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from nftgate.chain.client import ChainQuery, Web3ChainClient
from nftgate.config import NftGateConfig, load_config
from nftgate.core.relay import RoleUpdateRelay
from nftgate.core.sessions import SessionStore
from nftgate.core.verification import WalletVerifier

logger = logging.getLogger(__name__)


def _load_api_key(name: str) -> str:
    """Read a shared secret from the environment.

    An unset key is replaced with a random token nobody knows, which
    effectively disables that client.
    """
    key = os.getenv(name, "").strip()
    if not key:
        logger.warning("%s is not set; generated a random key, %s clients will be rejected", name, name)
        return secrets.token_urlsafe(32)
    return key


BOT_API_KEY: str = _load_api_key("BOT_API_KEY")
FRONTEND_API_KEY: str = _load_api_key("FRONTEND_API_KEY")


@lru_cache(maxsize=1)
def get_config() -> NftGateConfig:
    return load_config(os.getenv("NFTGATE_CONFIG", "config.yaml"))


@lru_cache(maxsize=1)
def get_store() -> SessionStore:
    return SessionStore()


@lru_cache(maxsize=1)
def get_relay() -> RoleUpdateRelay:
    return RoleUpdateRelay()


@lru_cache(maxsize=1)
def get_chain() -> ChainQuery:
    rpc_url = os.getenv("RPC_URL", "").strip()
    if not rpc_url:
        raise RuntimeError("RPC_URL environment variable is not set.")
    cfg = get_config()
    return Web3ChainClient(
        rpc_url,
        cfg.nft_contract_address,
        cfg.staking_contract_address,
        timeout=cfg.chain_timeout_seconds,
    )


def get_verifier(
    store: Annotated[SessionStore, Depends(get_store)],
    relay: Annotated[RoleUpdateRelay, Depends(get_relay)],
    chain: Annotated[ChainQuery, Depends(get_chain)],
    cfg: Annotated[NftGateConfig, Depends(get_config)],
) -> WalletVerifier:
    return WalletVerifier(store, relay, chain, timeout=cfg.chain_timeout_seconds)


def require_api_key(
    x_api_key: Annotated[str | None, Header()] = None,
) -> str:
    """Accept either the bot or the frontend shared secret.  401/403 otherwise."""
    if not x_api_key:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "API key required")
    for key in (BOT_API_KEY, FRONTEND_API_KEY):
        if secrets.compare_digest(x_api_key, key):
            return x_api_key
    logger.warning("Rejected request with invalid API key")
    raise HTTPException(status.HTTP_403_FORBIDDEN, "Invalid API key")

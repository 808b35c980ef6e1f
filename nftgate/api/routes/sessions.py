"""
nftgate.api.routes.sessions — Session & wallet endpoints
=========================================================
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from nftgate.api.deps import get_store, get_verifier, require_api_key
from nftgate.core.sessions import SessionStore
from nftgate.core.verification import WalletVerifier
from nftgate.errors import SessionNotFound

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions"], dependencies=[Depends(require_api_key)])


def snowflake_to_str(value):
    # Discord ids arrive as strings or as JSON numbers.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------
class SessionCreate(BaseModel):
    username: str = Field(min_length=1)
    discordId: str | None = None

    coerce_snowflake = field_validator("discordId", mode="before")(snowflake_to_str)


class DiscordLink(BaseModel):
    sessionId: str = Field(min_length=1)
    username: str = Field(min_length=1)
    discordId: str = Field(min_length=1)

    coerce_snowflake = field_validator("discordId", mode="before")(snowflake_to_str)


class WalletSubmit(BaseModel):
    address: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------
@router.post("/session")
def create_session(body: SessionCreate, store: SessionStore = Depends(get_store)):
    session = store.create_session(body.username, body.discordId)
    return {"success": True, "sessionId": session.id, "session": session.to_dict()}


@router.get("/session/{session_id}")
def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    session = store.get_by_id(session_id)
    if session is None:
        raise SessionNotFound(session_id)
    return {"session": session.to_dict()}


# ---------------------------------------------------------------------------
# Discord linking
# ---------------------------------------------------------------------------
@router.post("/discord/webhook")
def discord_webhook(body: DiscordLink, store: SessionStore = Depends(get_store)):
    """Register a session the bot has already issued an id for."""
    session = store.create_session(
        body.username, body.discordId, session_id=body.sessionId,
    )
    return {"success": True, "sessionId": session.id, "session": session.to_dict()}


@router.get("/discord/session/{discord_id}")
def get_discord_session(discord_id: str, store: SessionStore = Depends(get_store)):
    session = store.get_by_discord_id(discord_id)
    if session is None:
        raise SessionNotFound(discord_id)
    return session.to_dict()


# ---------------------------------------------------------------------------
# Wallet verification
# ---------------------------------------------------------------------------
@router.post("/discord/{session_id}/wallets")
async def verify_wallet(
    session_id: str,
    body: WalletSubmit,
    verifier: WalletVerifier = Depends(get_verifier),
):
    logger.info("Wallet verification request: session=%s address=%s", session_id, body.address)
    result = await verifier.verify(session_id, body.address)
    return result.to_dict()

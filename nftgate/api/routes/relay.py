"""
nftgate.api.routes.relay — Bot-facing role-update relay
========================================================

The bot polls ``GET /pending-role-updates`` (which clears the mailbox),
applies roles, then reports each user on ``POST /role-update/complete``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from nftgate.api.deps import get_relay, get_store, require_api_key
from nftgate.api.routes.sessions import snowflake_to_str
from nftgate.core.relay import RoleUpdateRelay
from nftgate.core.sessions import SessionStore
from nftgate.errors import ValidationError

router = APIRouter(tags=["relay"], dependencies=[Depends(require_api_key)])


class RoleUpdateIn(BaseModel):
    userId: str = Field(min_length=1)
    totalNFTs: int = Field(ge=0)

    coerce_snowflake = field_validator("userId", mode="before")(snowflake_to_str)


class RoleUpdateComplete(BaseModel):
    userId: str | None = None
    success: bool = False
    roles: list[str] | None = None
    error: str | None = None

    coerce_snowflake = field_validator("userId", mode="before")(snowflake_to_str)


@router.post("/role-update")
def enqueue_role_update(body: RoleUpdateIn, relay: RoleUpdateRelay = Depends(get_relay)):
    relay.enqueue(body.userId, body.totalNFTs)
    return {"success": True}


@router.get("/pending-role-updates")
def drain_role_updates(relay: RoleUpdateRelay = Depends(get_relay)):
    return [update.to_dict() for update in relay.drain_all()]


@router.post("/role-update/complete")
def complete_role_update(
    body: RoleUpdateComplete,
    relay: RoleUpdateRelay = Depends(get_relay),
    store: SessionStore = Depends(get_store),
):
    if not body.userId:
        raise ValidationError("Missing user ID")
    relay.complete(body.userId, body.success, roles=body.roles, error=body.error)
    session = store.get_by_discord_id(body.userId)
    if session is not None:
        store.touch(session)
    return {"success": True}

"""
nftgate.bot.relay_client — HTTP client for the role-update relay
=================================================================

The bot's side of the relay contract.  Authenticates with ``BOT_API_KEY``
on the ``x-api-key`` header.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx

from nftgate.constants import API_KEY_HEADER
from nftgate.core.models import PendingRoleUpdate

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class RelayClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}/api",
            headers={API_KEY_HEADER: self.api_key},
            timeout=self.timeout,
            transport=self._transport or httpx.AsyncHTTPTransport(retries=1),
        )

    async def fetch_pending(self) -> list[PendingRoleUpdate]:
        """Drain the mailbox.  The server clears it as a side effect."""
        async with self._client() as client:
            resp = await client.get("/pending-role-updates")
            resp.raise_for_status()
            payload = resp.json()

        return [
            PendingRoleUpdate(
                user_id=str(item["userId"]),
                total_nfts=int(item["totalNFTs"]),
                enqueued_at=int(item.get("timestamp") or 0),
            )
            for item in payload
        ]

    async def report(
        self,
        user_id: str,
        success: bool,
        *,
        roles: Sequence[str] | None = None,
        error: str | None = None,
    ) -> None:
        body: dict = {"userId": user_id, "success": success}
        if roles is not None:
            body["roles"] = list(roles)
        if error is not None:
            body["error"] = error

        async with self._client() as client:
            resp = await client.post("/role-update/complete", json=body)
            resp.raise_for_status()

"""
nftgate.bot.cogs.role_sync — Relay Consumer
============================================

Every ``poll_interval_seconds`` the bot drains the API's pending
role-update mailbox, applies the holder role policy to each member, and
reports the outcome per user.  One user failing never stops the batch;
failures are reported, not retried (the next wallet verification
re-enqueues the user).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
import httpx
from discord.ext import commands, tasks

from nftgate.bot.roles import apply_holder_roles
from nftgate.core.models import PendingRoleUpdate

if TYPE_CHECKING:
    from nftgate.bot.core import NftGateBot

logger = logging.getLogger(__name__)


class RoleSync(commands.Cog, name="RoleSync"):
    """Polls the relay and keeps holder roles in sync."""

    def __init__(self, bot: NftGateBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        self.poll_loop.change_interval(seconds=self.bot.cfg.poll_interval_seconds)
        self.poll_loop.start()

    async def cog_unload(self) -> None:
        self.poll_loop.cancel()

    @tasks.loop(seconds=30)
    async def poll_loop(self):
        try:
            await self.sync_pending()
        except Exception:
            logger.exception("Role sync pass failed", extra={"task": "role_sync"})

    @poll_loop.before_loop
    async def _wait_ready(self):
        await self.bot.wait_until_ready()

    async def sync_pending(self) -> int:
        """Run one drain → apply → report pass.  Returns the number processed."""
        try:
            updates = await self.bot.relay.fetch_pending()
        except httpx.HTTPError as exc:
            logger.warning("Could not fetch pending role updates: %s", exc)
            return 0

        if not updates:
            return 0

        guild = self.bot.get_guild(self.bot.cfg.guild_id)
        if guild is None:
            logger.warning(
                "Guild %d not found, reporting %d update(s) as failed",
                self.bot.cfg.guild_id, len(updates),
            )
            for update in updates:
                await self._report(update, False, error="Guild not found")
            return len(updates)

        for update in updates:
            await self.sync_one(guild, update)
        return len(updates)

    async def sync_one(self, guild: discord.Guild, update: PendingRoleUpdate) -> None:
        try:
            member = guild.get_member(int(update.user_id))
            if member is None:
                member = await guild.fetch_member(int(update.user_id))
            roles = await apply_holder_roles(member, update.total_nfts, self.bot.cfg)
        except discord.NotFound:
            logger.warning("Member %s not found in guild %d", update.user_id, guild.id)
            await self._report(update, False, error="Member not found")
        except (discord.HTTPException, LookupError, ValueError) as exc:
            logger.warning("Role update for %s failed: %s", update.user_id, exc)
            await self._report(update, False, error=str(exc))
        else:
            await self._report(update, True, roles=roles)

    async def _report(self, update: PendingRoleUpdate, success: bool, **kwargs) -> None:
        try:
            await self.bot.relay.report(update.user_id, success, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Could not report role update for %s: %s", update.user_id, exc)


async def setup(bot: NftGateBot) -> None:
    await bot.add_cog(RoleSync(bot))

"""
nftgate.bot.core — Bot Instance & Cog Loader
=============================================

:class:`NftGateBot` carries the shared config (``bot.cfg``) and the relay
client (``bot.relay``) so every Cog can reach them, and loads the cogs
listed in :data:`EXTENSIONS` on startup.
"""

from __future__ import annotations

import logging

import discord
from discord.ext import commands

from nftgate.bot.relay_client import RelayClient
from nftgate.config import NftGateConfig

logger = logging.getLogger(__name__)

EXTENSIONS: list[str] = [
    "nftgate.bot.cogs.role_sync",
]


class NftGateBot(commands.Bot):
    """Bot subclass that applies holder roles drained from the relay.

    Parameters
    ----------
    cfg:
        The parsed :class:`NftGateConfig` from ``config.yaml``.
    relay:
        Client for the API's bot-facing relay endpoints.
    """

    def __init__(self, cfg: NftGateConfig, relay: RelayClient) -> None:
        # GUILD_MEMBERS is privileged (enable in the Developer Portal);
        # needed to resolve members for role changes.
        intents = discord.Intents.default()
        intents.members = True
        intents.presences = False

        super().__init__(command_prefix="!", intents=intents)

        self.cfg = cfg
        self.relay = relay

    async def setup_hook(self) -> None:
        """Load Cog extensions.  One broken Cog shouldn't take down the bot."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)

        guild = self.get_guild(self.cfg.guild_id)
        if guild is None:
            logger.warning("Guild %d not found; role sync will fail", self.cfg.guild_id)
            return

        for role_id in (self.cfg.verified_role_id, self.cfg.elite_role_id):
            if guild.get_role(role_id) is None:
                logger.warning("Configured role %d not found in guild %s", role_id, guild.name)

"""
nftgate.bot.roles — Holder Role Policy
=======================================

``totalNFTs >= 1``  → verified role
``totalNFTs >= 10`` → elite role (in addition to verified)

Below a threshold the corresponding role is removed if the member holds it.
"""

from __future__ import annotations

import logging

import discord

from nftgate.config import NftGateConfig
from nftgate.constants import ELITE_ROLE_THRESHOLD, VERIFIED_ROLE_THRESHOLD

logger = logging.getLogger(__name__)

ROLE_REASON = "NftGate: holder verification"


def desired_roles(total_nfts: int, cfg: NftGateConfig) -> dict[int, bool]:
    """Map each managed role id to whether the member should hold it."""
    return {
        cfg.verified_role_id: total_nfts >= VERIFIED_ROLE_THRESHOLD,
        cfg.elite_role_id: total_nfts >= ELITE_ROLE_THRESHOLD,
    }


async def apply_holder_roles(
    member: discord.Member,
    total_nfts: int,
    cfg: NftGateConfig,
) -> list[str]:
    """Add/remove managed roles on *member*.  Returns the managed roles now held.

    Raises :class:`discord.HTTPException` (including ``Forbidden``) if Discord
    rejects a change, and :class:`LookupError` if a configured role does not
    exist in the guild.
    """
    held_ids = {role.id for role in member.roles}
    to_add: list[discord.Role] = []
    to_remove: list[discord.Role] = []
    now_held: list[str] = []

    for role_id, wanted in desired_roles(total_nfts, cfg).items():
        role = member.guild.get_role(role_id)
        if role is None:
            raise LookupError(f"Role {role_id} not found in guild {member.guild.id}")
        if wanted:
            now_held.append(role.name)
            if role_id not in held_ids:
                to_add.append(role)
        elif role_id in held_ids:
            to_remove.append(role)

    if to_add:
        await member.add_roles(*to_add, reason=ROLE_REASON)
    if to_remove:
        await member.remove_roles(*to_remove, reason=ROLE_REASON)

    if to_add or to_remove:
        logger.info(
            "Roles for %s (%d NFTs): +%s -%s",
            member.id, total_nfts,
            [r.name for r in to_add], [r.name for r in to_remove],
        )
    return now_held

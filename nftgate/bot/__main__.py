"""
nftgate.bot.__main__ — Entry point for ``python -m nftgate.bot``
================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (guild, roles, API URL).
3. Build the relay client.
4. Create the NftGateBot and run it (blocking).
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from nftgate.bot.core import NftGateBot
from nftgate.bot.relay_client import RelayClient
from nftgate.config import load_config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("nftgate")


def main() -> None:
    """Bootstrap and run the role-sync bot."""

    # 1. Environment variables (secrets).
    load_dotenv()

    token = os.getenv("DISCORD_TOKEN")
    if not token or token == "your-discord-bot-token-here":
        logger.critical(
            "DISCORD_TOKEN is not set.  "
            "Copy .env.example → .env and paste your bot token."
        )
        sys.exit(1)

    api_key = os.getenv("BOT_API_KEY")
    if not api_key:
        logger.critical("BOT_API_KEY is not set; the bot cannot reach the relay.")
        sys.exit(1)

    # 2. Soft configuration.
    cfg = load_config(os.getenv("NFTGATE_CONFIG", "config.yaml"))
    api_url = os.getenv("NFTGATE_API_URL", cfg.api_base_url)
    logger.info("Config loaded: guild %d, relay at %s", cfg.guild_id, api_url)

    # 3. Relay client.
    relay = RelayClient(api_url, api_key)

    # 4. Run (blocks until Ctrl+C or SIGTERM).
    bot = NftGateBot(cfg=cfg, relay=relay)
    logger.info("Starting NftGate bot…")
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()

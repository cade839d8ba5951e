"""
Entry point for the smart responder bot.

Reads secrets from .env, validates the JSON config and runs the client
until interrupted.
"""
from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from discord.errors import LoginFailure, PrivilegedIntentsRequired

ENV_PATH = Path(__file__).parent / ".env"
load_dotenv(ENV_PATH)

# Provider API keys and SMART_CONFIG_PATH are read from the environment,
# so these imports must follow load_dotenv.
from bot import SmartBot
from core.config import ConfigError, load_config
from responders.engine import SmartResponder

logger = logging.getLogger("smartbot")


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("discord").setLevel(level)
    # aiohttp is chatty about every provider request
    if level > logging.DEBUG:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)


def bot_token() -> str | None:
    return os.getenv("DISCORD_BOT_TOKEN") or os.getenv("BOT_TOKEN")


async def main() -> None:
    token = bot_token()
    if not token:
        logger.error("Missing bot token. Set DISCORD_BOT_TOKEN in .env or environment.")
        return

    try:
        config = await load_config()
        responder = SmartResponder.from_config(config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return

    bot = SmartBot(config, responder)
    try:
        await bot.start(token)
    except PrivilegedIntentsRequired:
        logger.error(
            "The MESSAGE CONTENT intent is required to read trigger phrases. "
            "Enable it for this application in the Discord developer portal."
        )
    except LoginFailure:
        logger.error("Discord rejected the bot token. Reset it in the developer portal and update .env.")
    finally:
        if not bot.is_closed():
            await bot.close()


if __name__ == "__main__":
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    if not ENV_PATH.exists():
        logger.warning(".env file not found at %s", ENV_PATH)
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass

"""
UniBan Discord Bot with Sharding Support
Main entry point for the bot
"""

import os
import sys
import asyncio
import logging
from typing import List

import discord
from dotenv import load_dotenv

from uniban import __version__
from uniban.bot import UniBanBot
from uniban.config import BotConfig
from uniban.database import RecordStoreClient

logger = logging.getLogger('discord_bot')


def setup_logging(config: BotConfig):
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        os.makedirs(os.path.dirname(config.log_file) or '.', exist_ok=True)
        handlers.append(logging.FileHandler(config.log_file, mode='a', encoding='utf-8'))

    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


async def main():
    load_dotenv()
    config = BotConfig.from_env()
    setup_logging(config)

    if not config.token:
        logger.error("UB_TOKEN not found in environment variables!")
        sys.exit(1)

    if config.shard_count:
        logger.info(f"Starting UniBan {__version__} with {config.shard_count} shards")
        if config.shard_ids:
            logger.info(f"Running shards: {config.shard_ids}")
    else:
        logger.info(f"Starting UniBan {__version__} with automatic sharding")

    store_client = RecordStoreClient(
        base_url=config.db_url,
        username=config.db_user,
        password=config.db_pass,
        timeout=config.db_timeout
    )
    bot = UniBanBot(config, store_client, shard_count=config.shard_count, shard_ids=config.shard_ids)

    try:
        await bot.start(config.token)
    except discord.LoginFailure:
        logger.error("Invalid Discord token! Please check your UB_TOKEN.")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        if not bot.is_closed():
            await bot.close()


def run():
    asyncio.run(main())


if __name__ == '__main__':
    run()

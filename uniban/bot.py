"""
UniBan Bot
Sharded command bot owning the store, cache and reconciler
"""

import asyncio
import logging
from typing import Any, Coroutine, Optional, Set

import discord
from discord.ext import commands

from uniban.cogs import AdminCog, ModerationCog, RecordsCog, UtilityCog
from uniban.config import BotConfig
from uniban.context import UniBanContext
from uniban.db_manager import DatabaseManager
from uniban.errors import GuildBlacklisted
from uniban.guild_cache import GuildCache
from uniban.platform import DiscordBackend, PlatformBackend
from uniban.sync import Reconciler, SyncReport
from uniban.utils.permissions import PermissionChecker

logger = logging.getLogger('discord_bot')
command_logger = logging.getLogger('commands')


class UniBanBot(commands.AutoShardedBot):
    def __init__(
        self,
        config: BotConfig,
        store_client,
        platform: Optional[PlatformBackend] = None,
        shard_count: Optional[int] = None,
        shard_ids: Optional[list] = None
    ):
        intents = discord.Intents.default()
        intents.message_content = True

        super().__init__(
            command_prefix=config.prefix,
            intents=intents,
            help_command=None,
            case_insensitive=True,
            shard_count=shard_count,
            shard_ids=shard_ids
        )

        self.config = config
        self.platform: PlatformBackend = platform if platform is not None else DiscordBackend(self)
        self.db = DatabaseManager(store_client)
        self.guild_cache = GuildCache()
        self.permissions = PermissionChecker(self.db, self.platform)
        self.reconciler = Reconciler(self.db, self.guild_cache, self.platform, concurrency=config.sync_concurrency)
        self._sync_tasks: Set[asyncio.Task] = set()

        self.add_check(self._refuse_blacklisted, call_once=True)

    async def _refuse_blacklisted(self, ctx: UniBanContext) -> bool:
        if ctx.guild_key is not None and self.guild_cache.is_blacklisted(ctx.guild_key):
            raise GuildBlacklisted(ctx.guild_key)
        return True

    async def get_context(self, origin, /, *, cls=UniBanContext):
        return await super().get_context(origin, cls=cls)

    async def setup_hook(self):
        logger.info("Initializing record store connection...")
        await self.db.initialize()

        for cog in (AdminCog(self), RecordsCog(self), ModerationCog(self), UtilityCog(self)):
            await self.add_cog(cog)
            logger.info(f"Loaded cog: {cog.__class__.__name__}")
        logger.info(f"Loaded {len(self.commands)} commands")

    async def recache(self) -> int:
        return await self.guild_cache.recache(self.db)

    def _spawn(self, coro: Coroutine[Any, Any, SyncReport]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._sync_tasks.add(task)
        task.add_done_callback(self._sync_done)
        return task

    def _sync_done(self, task: asyncio.Task):
        self._sync_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Background sync failed", exc_info=task.exception())

    def schedule_forward(self, user_id: str) -> asyncio.Task:
        return self._spawn(self.reconciler.forward(user_id))

    def schedule_reverse(self, guild_id: str) -> asyncio.Task:
        return self._spawn(self.reconciler.reverse(guild_id))

    async def drain(self):
        while self._sync_tasks:
            await asyncio.gather(*list(self._sync_tasks), return_exceptions=True)

    async def on_ready(self):
        logger.info("Bot is ready!")
        if self.user:
            logger.info(f"Logged in as: {self.user} (ID: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guild(s)")
        logger.info(f"Discord.py version: {discord.__version__}")

        try:
            await self.recache()
        except Exception as e:
            logger.error(f"Failed to load guild records: {e}")

    async def on_shard_ready(self, shard_id: int):
        logger.info(f"Shard {shard_id} is ready")

    async def on_shard_disconnect(self, shard_id: int):
        logger.warning(f"Shard {shard_id} disconnected")

    async def on_shard_resumed(self, shard_id: int):
        logger.info(f"Shard {shard_id} resumed")

    async def on_command(self, ctx: UniBanContext):
        command_logger.info(f"{ctx.author.id}: {ctx.message.content}")

    async def on_guild_join(self, guild: discord.Guild):
        logger.info(f"Joined guild: {guild.name} (ID: {guild.id})")
        self.schedule_reverse(str(guild.id))

    async def on_guild_remove(self, guild: discord.Guild):
        logger.info(f"Left guild: {guild.name} (ID: {guild.id})")

    async def on_member_unban(self, guild: discord.Guild, user: discord.User):
        if self.reconciler.is_own_unban(str(guild.id), str(user.id)):
            logger.debug(f"Ignoring unban of {user.id} in {guild.id} issued by sync")
            return
        self.schedule_forward(str(user.id))

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError):
        if isinstance(error, commands.CommandNotFound):
            return

        if ctx.cog is not None and ctx.cog.has_error_handler():
            return

        logger.error(f"Command error in {ctx.command}: {error}", exc_info=error)

    async def close(self):
        logger.info("Shutting down bot...")
        await self.drain()
        await self.db.close()
        await super().close()

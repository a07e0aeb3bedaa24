"""
Admin Cog
Bot administration: invites, ranks, guild blacklist and cache control
"""

import logging

from discord.ext import commands

from uniban.cogs.base import UniBanCog
from uniban.context import UniBanContext
from uniban.models.guild import DEFAULT_BAN_RULES, GuildRecord
from uniban.utils.helpers import truncate_string
from uniban.utils.permissions import PermissionLevel, require_level

logger = logging.getLogger('commands')


class AdminCog(UniBanCog):
    @commands.command(name="invite", description="Generates a bot invite link.")
    async def invite(self, ctx: UniBanContext, *tokens: str):
        await ctx.parse(tokens)
        await ctx.respond(self.bot.platform.invite_url())

    @commands.command(name="eval", usage="<expression>", description="Evaluates a Python expression.",
                      extras={'signature': 'str*'})
    @require_level(PermissionLevel.BOT_OWNER)
    async def eval_(self, ctx: UniBanContext, *tokens: str):
        words, = await ctx.parse(tokens)
        try:
            result = eval(' '.join(words), {'__builtins__': {}}, {'bot': self.bot, 'ctx': ctx})
        except Exception as e:
            await ctx.respond(f"`{e}`")
            return
        if result is None:
            await ctx.respond("No result.")
            return
        await ctx.respond(f"`{truncate_string(repr(result), 1900)}`")

    @commands.command(name="halt", description="Kills the bot.")
    @require_level(PermissionLevel.BOT_OWNER)
    async def halt(self, ctx: UniBanContext, *tokens: str):
        await ctx.parse(tokens)
        logger.info(f"{ctx.author.id} requested halt")
        try:
            await ctx.respond("Halting!")
        finally:
            await self.bot.close()

    @commands.command(name="blacklist", usage="<guildId>", description="Blacklists a guild.",
                      extras={'signature': 'id'})
    @require_level(PermissionLevel.ADMIN)
    async def blacklist(self, ctx: UniBanContext, *tokens: str):
        guild_id, = await ctx.parse(tokens)
        record = await self.bot.db.find_guild(guild_id)
        if record is not None:
            if record.blacklisted:
                await ctx.respond("Guild is already blacklisted!")
                return
            record = await self.bot.db.update_guild(record, blacklisted=True)
        else:
            record = await self.bot.db.create_guild(
                GuildRecord(guild=guild_id, blacklisted=True, banrules=DEFAULT_BAN_RULES)
            )
        self.bot.guild_cache.put(record)
        logger.info(f"{ctx.author.id} blacklisted guild {guild_id}")
        await ctx.respond("Registered on blacklist.")

    @commands.command(name="unblacklist", usage="<guildId>", description="Removes a guild from the blacklist.",
                      extras={'signature': 'id'})
    @require_level(PermissionLevel.ADMIN)
    async def unblacklist(self, ctx: UniBanContext, *tokens: str):
        guild_id, = await ctx.parse(tokens)
        record = await self.bot.db.find_guild(guild_id)
        if record is None or not record.blacklisted:
            await ctx.respond("Guild is not blacklisted!")
            return
        record = await self.bot.db.update_guild(record, blacklisted=False)
        self.bot.guild_cache.put(record)
        logger.info(f"{ctx.author.id} unblacklisted guild {guild_id}")
        if guild_id in self.bot.platform.guild_ids():
            self.bot.schedule_reverse(guild_id)
        await ctx.respond("Removed from blacklist.")

    async def _set_rank(self, ctx: UniBanContext, user, level: int) -> str:
        if not PermissionLevel.is_valid(level):
            return "Invalid permission level!"

        user_id = str(user.id)
        record = await self.bot.db.get_user(user_id)
        if level == PermissionLevel.EVERYONE:
            if record is None:
                return "User already has no permissions!"
            await self.bot.db.remove_user(record)
            logger.info(f"{ctx.author.id} cleared permissions of {user_id}")
            return "Cleared user permissions."

        if record is not None:
            if record.perms == level:
                return "User is already at that permission level!"
            await self.bot.db.update_user_perms(record, level)
        else:
            await self.bot.db.create_user(user_id, level)
        logger.info(f"{ctx.author.id} set permission level of {user_id} to {level}")
        return "Updated user permissions."

    @commands.command(name="setrank", usage="<user> <permLevel>",
                      description="Sets a user's administrative permission level.",
                      extras={'signature': 'user, int'})
    @require_level(PermissionLevel.BOT_OWNER)
    async def setrank(self, ctx: UniBanContext, *tokens: str):
        user, level = await ctx.parse(tokens)
        await ctx.respond(await self._set_rank(ctx, user, level))

    @commands.command(name="recache", description="Flushes the cached server data and rebuilds it.")
    @require_level(PermissionLevel.BOT_OWNER)
    async def recache(self, ctx: UniBanContext, *tokens: str):
        await ctx.parse(tokens)
        await self.bot.recache()
        await ctx.respond("Cache flushed.")

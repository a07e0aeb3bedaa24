"""
Records Cog
Staff commands operating directly on central ban records
"""

import logging

from discord.ext import commands

from uniban.cogs.base import UniBanCog
from uniban.context import UniBanContext
from uniban.utils import messages
from uniban.utils.embed_builder import EmbedBuilder
from uniban.utils.helpers import build_query
from uniban.utils.permissions import PermissionLevel, require_level

logger = logging.getLogger('commands')

NOT_LOCALLY_BANNED = "User is not locally banned in guild!"
MAX_LOOKUP_RESULTS = 3


class RecordsCog(UniBanCog):
    async def _set_verified(self, ctx: UniBanContext, user, guild_id: str, verified: bool) -> str:
        user_id = str(user.id)
        ban = await self.bot.db.find_ban(user_id, guild_id)
        if ban is None:
            return NOT_LOCALLY_BANNED
        if ban.verified == verified:
            return "Ban is already verified!" if verified else "Ban is not verified!"

        await self.bot.db.set_ban_verified(ban, verified)
        action = "verified" if verified else "unverified"
        logger.info(f"{ctx.author.id} {action} {guild_id}:{user_id}")
        self.bot.schedule_forward(ban.user)
        return "Ban verified. \U0001F528" if verified else "Ban unverified."

    @commands.command(name="verify", usage="<user> <guildId>", description="Verifies a ban.",
                      extras={'signature': 'user, id'})
    @require_level(PermissionLevel.ADMIN)
    async def verify(self, ctx: UniBanContext, *tokens: str):
        user, guild_id = await ctx.parse(tokens)
        await ctx.respond(await self._set_verified(ctx, user, guild_id, True))

    @commands.command(name="unverify", usage="<user> <guildId>", description="Unverifies a ban.",
                      extras={'signature': 'user, id'})
    @require_level(PermissionLevel.ADMIN)
    async def unverify(self, ctx: UniBanContext, *tokens: str):
        user, guild_id = await ctx.parse(tokens)
        await ctx.respond(await self._set_verified(ctx, user, guild_id, False))

    @commands.command(name="drop", usage="<user> <guildId>", description="Drops a local ban.",
                      extras={'signature': 'user, id'})
    @require_level(PermissionLevel.ADMIN)
    async def drop(self, ctx: UniBanContext, *tokens: str):
        user, guild_id = await ctx.parse(tokens)
        user_id = str(user.id)
        ban = await self.bot.db.find_ban(user_id, guild_id)
        if ban is None:
            await ctx.respond(NOT_LOCALLY_BANNED)
            return

        await self.bot.db.remove_ban(ban)
        logger.info(f"{ctx.author.id} dropped ban {guild_id}:{user_id}")
        self.bot.schedule_forward(ban.user)
        await ctx.respond("Ban dropped.")

    @commands.command(name="lookup", usage="<key=value> [key=value]...", description="Queries the ban database.",
                      extras={'signature': 'str*'})
    async def lookup(self, ctx: UniBanContext, *tokens: str):
        entries, = await ctx.parse(tokens)
        query = build_query(entries) if entries else None
        if query is None:
            await ctx.respond(messages.NO_QUERY)
            return

        results = await self.bot.db.query_bans(query)
        if not results:
            await ctx.respond("No results.")
        elif len(results) > MAX_LOOKUP_RESULTS:
            await ctx.respond(f"Too many results; try `limit={MAX_LOOKUP_RESULTS}`.")
        else:
            await ctx.respond([EmbedBuilder.ban_record(ban) for ban in results])

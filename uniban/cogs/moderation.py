"""
Moderation Cog
Guild-side commands: local bans and per-guild ban rules
"""

import logging

from discord.ext import commands

from uniban.cogs.base import UniBanCog
from uniban.context import UniBanContext
from uniban.models.ban import NO_EVIDENCE, BanReason, BanRecord
from uniban.models.guild import GuildRecord
from uniban.utils import messages
from uniban.utils.banrules import RuleError, compile_rules, split_rule_text
from uniban.utils.embed_builder import EmbedBuilder
from uniban.utils.permissions import PermissionLevel

logger = logging.getLogger('commands')


class ModerationCog(UniBanCog):
    @commands.command(name="ban", usage="<user> <reason> [evidence]", description="Locally bans a user.",
                      extras={'signature': 'user, str, str*'})
    @commands.guild_only()
    @commands.has_permissions(ban_members=True)
    async def ban(self, ctx: UniBanContext, *tokens: str):
        user, reason, evidence = await ctx.parse(tokens)
        user_id = str(user.id)
        if not await self.bot.permissions.can_ban(user_id):
            await ctx.respond(messages.UNBANNABLE)
            return

        existing = await self.bot.db.find_ban(user_id, ctx.guild_key)
        if existing is not None:
            await ctx.respond(f"User was already banned at {existing.banned_at_iso} for {existing.reason}!")
            return
        if not BanReason.is_valid(reason):
            await ctx.respond("Invalid ban reason! Try `./reasons`.")
            return

        verified = await self.bot.permissions.has_level(ctx.author_key, PermissionLevel.ADMIN)
        await self.bot.db.create_ban(BanRecord(
            user=user_id,
            reason=reason,
            source=ctx.guild_key,
            verified=verified,
            evidence=' '.join(evidence) if evidence else NO_EVIDENCE
        ))
        logger.info(f"{ctx.author.id} banned {ctx.guild_key}:{user_id} for {reason} (verified={verified})")
        self.bot.schedule_forward(user_id)
        await ctx.respond("User was banned. \U0001F44B")

    @commands.command(name="unban", usage="<user>", description="Reverts a local ban.",
                      extras={'signature': 'user'})
    @commands.guild_only()
    @commands.has_permissions(ban_members=True)
    async def unban(self, ctx: UniBanContext, *tokens: str):
        user, = await ctx.parse(tokens)
        user_id = str(user.id)
        existing = await self.bot.db.find_ban(user_id, ctx.guild_key)
        if existing is None:
            await ctx.respond("User is not locally banned!")
            return

        await self.bot.db.remove_ban(existing)
        logger.info(f"{ctx.author.id} unbanned {ctx.guild_key}:{user_id}")
        self.bot.schedule_forward(user_id)
        await ctx.respond("User was unbanned.")

    @commands.command(name="banrules", description="Lists the current ban rules active on a server.")
    @commands.guild_only()
    @commands.has_permissions(manage_guild=True)
    async def banrules(self, ctx: UniBanContext, *tokens: str):
        await ctx.parse(tokens)
        record = await self.bot.db.find_guild(ctx.guild_key)
        if record is None:
            record = GuildRecord(guild=ctx.guild_key)
        await ctx.respond(f"Ban rules: `{record.effective_banrules}`")

    @commands.command(name="setbanrules", usage="<rule> [rule]...", description="Modifies a server's active ban rules.",
                      extras={'signature': 'str*'})
    @commands.guild_only()
    @commands.has_permissions(manage_guild=True)
    async def setbanrules(self, ctx: UniBanContext, *tokens: str):
        words, = await ctx.parse(tokens)
        rules = [clause for word in words for clause in split_rule_text(word)]
        result = compile_rules(rules)
        if isinstance(result, RuleError):
            await ctx.respond(result.message)
            return

        joined = ', '.join(rules)
        record = await self.bot.db.find_guild(ctx.guild_key)
        if record is not None:
            record = await self.bot.db.update_guild(record, banrules=joined)
        else:
            record = await self.bot.db.create_guild(GuildRecord(guild=ctx.guild_key, banrules=joined))
        self.bot.guild_cache.put(record)
        logger.info(f"{ctx.author.id} set ban rules of {ctx.guild_key} to `{joined}`")

        self.bot.schedule_reverse(ctx.guild_key)
        await ctx.respond("Updated ban rules." if joined else "Cleared ban rules.")

    @commands.command(name="resync", description="Reconciles this server's ban list with the ban database.")
    @commands.guild_only()
    @commands.has_permissions(manage_guild=True)
    async def resync(self, ctx: UniBanContext, *tokens: str):
        await ctx.parse(tokens)
        report = await self.bot.reconciler.reverse(ctx.guild_key)
        await ctx.respond(EmbedBuilder.sync_report(ctx.guild.name, report))

"""
Utility Cog
General commands available to everyone
"""

from discord.ext import commands

from uniban.cogs.base import UniBanCog
from uniban.context import UniBanContext
from uniban.errors import UnknownTarget
from uniban.models.ban import BanReason


def format_user(user) -> str:
    return f"**{user.name}**#{user.discriminator}"


def help_line(prefix: str, command: commands.Command) -> str:
    usage = f"{command.name} {command.usage}" if command.usage else command.name
    return f"{prefix}{usage} | {command.description}"


class UtilityCog(UniBanCog):
    @commands.command(name="user", usage="[user]", description="Looks up a user by their ID.",
                      extras={'signature': 'id?'})
    async def user(self, ctx: UniBanContext, *tokens: str):
        user_id, = await ctx.parse(tokens)
        if user_id is None:
            await ctx.respond(format_user(ctx.author))
            return
        try:
            user = await self.bot.platform.fetch_user(user_id)
        except UnknownTarget:
            await ctx.respond("Could not find user by that ID!")
            return
        await ctx.respond(format_user(user))

    @commands.command(name="reasons", description="Lists valid ban reasons.")
    async def reasons(self, ctx: UniBanContext, *tokens: str):
        await ctx.parse(tokens)
        await ctx.respond(f"**Valid ban reasons:** {', '.join(BanReason.values())}")

    @commands.command(name="help", description="Lists available commands.")
    async def help(self, ctx: UniBanContext, *tokens: str):
        await ctx.parse(tokens)
        lines = sorted(help_line(self.bot.config.prefix, command) for command in self.bot.commands)
        await ctx.author.send("**__Available Commands__**\n```\n" + '\n'.join(lines) + "\n```")
        if ctx.guild is not None:
            await ctx.respond("Sent documentation in DMs.")

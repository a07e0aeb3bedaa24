"""
Base Cog
Shared error handling for every UniBan command
"""

import logging

from discord.ext import commands

from uniban.context import UniBanContext
from uniban.errors import GuildBlacklisted, InvalidSyntax
from uniban.utils import messages

logger = logging.getLogger('commands')


class UniBanCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot

    async def cog_command_error(self, ctx: UniBanContext, error: commands.CommandError):
        if isinstance(error, commands.CommandInvokeError):
            error = error.original

        if isinstance(error, InvalidSyntax):
            logger.info(f"{ctx.author.id} evoked invalid syntax error")
            await ctx.respond(str(error))
        elif isinstance(error, GuildBlacklisted):
            logger.info(f"Refused {ctx.invoked_with} from {ctx.author.id} in blacklisted guild {error.guild_id}")
            await ctx.respond(messages.GUILD_BLACKLISTED)
        elif isinstance(error, commands.NoPrivateMessage):
            await ctx.respond(messages.NOT_IN_GUILD)
        elif isinstance(error, commands.CheckFailure):
            await ctx.respond(messages.NO_PERMS)
        elif isinstance(error, commands.UserInputError):
            await ctx.respond(f"Invalid syntax: {error}")
        else:
            logger.warning(f"Command {ctx.command} raised an error", exc_info=error)
            await ctx.respond(messages.COMMAND_ERROR.format(error=error))

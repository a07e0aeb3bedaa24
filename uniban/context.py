"""
Command Context
Invocation context carrying the typed-argument parser and reply helper
"""

from typing import Any, List, Optional, Sequence

import discord
from discord.ext import commands

from uniban.utils.arguments import ArgumentParser


class UniBanContext(commands.Context):
    @property
    def guild_key(self) -> Optional[str]:
        return str(self.guild.id) if self.guild is not None else None

    @property
    def author_key(self) -> str:
        return str(self.author.id)

    async def parse(self, tokens: Sequence[str]) -> List[Any]:
        signature = self.command.extras.get('signature') if self.command else None
        return await ArgumentParser.from_signature(signature).parse(tokens, self)

    async def respond(self, result: Any):
        if not result:
            return
        if isinstance(result, discord.Embed):
            await self.message.reply(embed=result)
        elif isinstance(result, (list, tuple)):
            await self.message.reply(embeds=list(result))
        else:
            await self.message.reply(str(result))

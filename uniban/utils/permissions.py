"""
Permission System
Administrative levels stored remotely plus per-guild platform permissions
"""

from enum import IntEnum

from discord.ext import commands

from uniban.errors import StoreError


class PermissionLevel(IntEnum):
    EVERYONE = 0
    TRUSTED = 1
    MODERATOR = 2
    ADMIN = 3
    BOT_OWNER = 4

    @classmethod
    def is_valid(cls, level: int) -> bool:
        return cls.EVERYONE <= level <= cls.BOT_OWNER


class PermissionChecker:
    def __init__(self, db, platform):
        self.db = db
        self.platform = platform

    async def get_level(self, user_id: str) -> int:
        return await self.db.get_permission_level(user_id)

    async def has_level(self, user_id: str, level: int) -> bool:
        return await self.get_level(user_id) >= level

    async def can_ban(self, user_id: str) -> bool:
        if user_id == self.platform.self_id:
            return False
        return not await self.has_level(user_id, PermissionLevel.TRUSTED)


def require_level(level: PermissionLevel):
    """Command check passing only for users at ``level`` or above."""
    async def predicate(ctx: commands.Context) -> bool:
        try:
            return await ctx.bot.permissions.has_level(str(ctx.author.id), level)
        except StoreError as e:
            raise commands.CommandInvokeError(e) from e
    return commands.check(predicate)

"""
Error Types
Exceptions raised across the bot, grouped under a single base class
"""

from typing import Optional

from discord.ext import commands


class UniBanError(Exception):
    pass


class InvalidSyntax(UniBanError):
    @classmethod
    def expected(cls, type_name: str, position: int) -> 'InvalidSyntax':
        return cls(f"Invalid syntax: expected {type_name} at position {position}")

    @classmethod
    def too_many_arguments(cls) -> 'InvalidSyntax':
        return cls("Invalid syntax: too many arguments")


class ConversionError(UniBanError):
    """A single token could not be converted to the requested type."""


class StoreError(UniBanError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class PlatformError(UniBanError):
    pass


class UnknownTarget(PlatformError):
    pass


class GuildBlacklisted(commands.CheckFailure):
    def __init__(self, guild_id: str):
        super().__init__(f"Guild {guild_id} is blacklisted")
        self.guild_id = guild_id

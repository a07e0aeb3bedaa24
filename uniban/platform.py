"""
Platform Backend
Narrow interface to the chat platform that enforces bans
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Set

import discord

from uniban.errors import PlatformError, UnknownTarget


class PlatformBackend(ABC):
    @abstractmethod
    def guild_ids(self) -> List[str]:
        ...

    @abstractmethod
    async def ban(self, guild_id: str, user_id: str, reason: Optional[str] = None):
        ...

    @abstractmethod
    async def unban(self, guild_id: str, user_id: str, reason: Optional[str] = None):
        ...

    @abstractmethod
    async def fetch_enforced_bans(self, guild_id: str) -> Set[str]:
        ...

    @abstractmethod
    async def fetch_user(self, user_id: str) -> Any:
        ...

    @property
    @abstractmethod
    def self_id(self) -> Optional[str]:
        ...

    @abstractmethod
    def invite_url(self) -> str:
        ...


class DiscordBackend(PlatformBackend):
    def __init__(self, client: discord.Client):
        self.client = client

    def _guild(self, guild_id: str) -> discord.Guild:
        guild = self.client.get_guild(int(guild_id))
        if guild is None:
            raise UnknownTarget(f"Not connected to guild {guild_id}")
        return guild

    def guild_ids(self) -> List[str]:
        return [str(guild.id) for guild in self.client.guilds]

    async def ban(self, guild_id: str, user_id: str, reason: Optional[str] = None):
        guild = self._guild(guild_id)
        try:
            await guild.ban(discord.Object(id=int(user_id)), reason=reason, delete_message_seconds=0)
        except discord.NotFound as e:
            raise UnknownTarget(str(e))
        except discord.HTTPException as e:
            raise PlatformError(str(e))

    async def unban(self, guild_id: str, user_id: str, reason: Optional[str] = None):
        guild = self._guild(guild_id)
        try:
            await guild.unban(discord.Object(id=int(user_id)), reason=reason)
        except discord.NotFound as e:
            raise UnknownTarget(str(e))
        except discord.HTTPException as e:
            raise PlatformError(str(e))

    async def fetch_enforced_bans(self, guild_id: str) -> Set[str]:
        guild = self._guild(guild_id)
        try:
            return {str(entry.user.id) async for entry in guild.bans(limit=None)}
        except discord.HTTPException as e:
            raise PlatformError(str(e))

    async def fetch_user(self, user_id: str) -> discord.User:
        try:
            return await self.client.fetch_user(int(user_id))
        except discord.NotFound:
            raise UnknownTarget(f"Unknown user {user_id}")
        except discord.HTTPException as e:
            raise PlatformError(str(e))

    @property
    def self_id(self) -> Optional[str]:
        return str(self.client.user.id) if self.client.user else None

    def invite_url(self) -> str:
        return discord.utils.oauth_url(
            self.client.user.id,
            permissions=discord.Permissions(ban_members=True, read_messages=True, send_messages=True)
        )

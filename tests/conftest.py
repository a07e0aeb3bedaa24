"""Shared fakes for the record store, the chat platform and the bot."""

import itertools
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Set

import discord
import pytest

from uniban.bot import UniBanBot
from uniban.config import BotConfig
from uniban.errors import PlatformError, StoreError, UnknownTarget
from uniban.platform import PlatformBackend

MODERATOR_ID = "100000000000000001"
TARGET_ID = "200000000000000002"
ADMIN_ID = "300000000000000003"
OWNER_ID = "400000000000000004"
BROKEN_ID = "500000000000000005"
UNKNOWN_ID = "600000000000000006"
BOT_ID = "999999999999999999"


class FakeStore:
    def __init__(self):
        self.rows: Dict[str, List[Dict[str, Any]]] = {'bans': [], 'guilds': [], 'users': []}
        self.fail = False
        self._ids = itertools.count(1)

    def _check(self):
        if self.fail:
            raise StoreError("store unavailable", status=503)

    async def connect(self):
        pass

    async def close(self):
        pass

    async def list(self, collection, query=None):
        self._check()
        query = dict(query or {})
        limit = query.pop('limit', None)
        rows = [
            dict(row) for row in self.rows[collection]
            if all(str(row.get(key)).lower() == str(value).lower() for key, value in query.items())
        ]
        return rows[:int(limit)] if limit is not None else rows

    async def put(self, collection, row):
        self._check()
        stored = dict(row, id=next(self._ids))
        self.rows[collection].append(stored)
        return dict(stored)

    async def update(self, collection, row_id, changes):
        self._check()
        for row in self.rows[collection]:
            if row['id'] == row_id:
                row.update(changes)
                return dict(row)
        raise StoreError(f"no {collection} row {row_id}", status=404)

    async def remove(self, collection, row_id):
        self._check()
        self.rows[collection] = [row for row in self.rows[collection] if row['id'] != row_id]

    def add_ban(self, user, reason, source, verified=False, timestamp=1_500_000_000_000, evidence="None provided"):
        row = {
            'id': next(self._ids), 'user': user, 'reason': reason, 'source': source,
            'timestamp': timestamp, 'verified': verified, 'evidence': evidence
        }
        self.rows['bans'].append(row)
        return row

    def add_guild(self, guild, blacklisted=False, banrules=""):
        row = {'id': next(self._ids), 'guild': guild, 'blacklisted': blacklisted, 'banrules': banrules}
        self.rows['guilds'].append(row)
        return row

    def add_user(self, user, perms):
        row = {'id': next(self._ids), 'user': user, 'perms': perms}
        self.rows['users'].append(row)
        return row


class FakePlatform(PlatformBackend):
    def __init__(self, guilds=(), users=None):
        self.enforced: Dict[str, Set[str]] = {guild: set() for guild in guilds}
        self.users: Dict[str, Any] = dict(users or {})
        self.calls: List[tuple] = []
        self.failing_guilds: Set[str] = set()

    def guild_ids(self):
        return list(self.enforced)

    async def ban(self, guild_id, user_id, reason=None):
        self.calls.append(('ban', guild_id, user_id))
        if guild_id in self.failing_guilds:
            raise PlatformError("Missing Permissions")
        self.enforced[guild_id].add(user_id)

    async def unban(self, guild_id, user_id, reason=None):
        self.calls.append(('unban', guild_id, user_id))
        if guild_id in self.failing_guilds:
            raise PlatformError("Missing Permissions")
        if user_id not in self.enforced[guild_id]:
            raise UnknownTarget("Unknown Ban")
        self.enforced[guild_id].discard(user_id)

    async def fetch_enforced_bans(self, guild_id):
        if guild_id in self.failing_guilds:
            raise PlatformError("Missing Permissions")
        return set(self.enforced[guild_id])

    async def fetch_user(self, user_id):
        if user_id not in self.users:
            raise UnknownTarget(f"Unknown user {user_id}")
        return self.users[user_id]

    @property
    def self_id(self) -> Optional[str]:
        return BOT_ID

    def invite_url(self):
        return "https://discord.com/oauth2/authorize?client_id=999999999999999999"


class FakeAuthor:
    def __init__(self, user_id, name="someone", discriminator="0001", permissions=None):
        self.id = int(user_id)
        self.name = name
        self.discriminator = discriminator
        self.bot = False
        self.guild_permissions = permissions if permissions is not None else discord.Permissions.none()
        self.dms: List[str] = []

    async def send(self, content):
        self.dms.append(content)


class FakeGuild:
    def __init__(self, guild_id, name="Test Guild"):
        self.id = int(guild_id)
        self.name = name
        self.text_channels: List[Any] = []

    def get_channel(self, channel_id):
        return None


class FakeChannel:
    def __init__(self, guild=None):
        self.guild = guild
        self.type = discord.ChannelType.text if guild is not None else discord.ChannelType.private

    def permissions_for(self, member):
        return member.guild_permissions


class FakeMessage:
    def __init__(self, content, author, guild_id=None, guild_name="Test Guild"):
        self.content = content
        self.author = author
        self.guild = FakeGuild(guild_id, guild_name) if guild_id is not None else None
        self.channel = FakeChannel(self.guild)
        self.mentions: List[Any] = []
        self.attachments: List[Any] = []
        self.replies: List[Any] = []
        self._state = None

    async def reply(self, content=None, embed=None, embeds=None):
        self.replies.append(content if content is not None else embed if embed is not None else embeds)


class HarnessBot(UniBanBot):
    """The real bot with platform lookups answered from ``FakePlatform.users``."""

    def __init__(self, store, platform, prefix="./"):
        super().__init__(BotConfig(prefix=prefix, sync_concurrency=4, log_file=None), store, platform)

    @property
    def user(self):
        return self.platform.users[BOT_ID]

    def get_user(self, user_id, /):
        return self.platform.users.get(str(user_id))

    async def fetch_user(self, user_id, /):
        if str(user_id) == BROKEN_ID:
            raise RuntimeError("user lookup crashed")
        raise discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "Unknown User")


@asynccontextmanager
async def running_bot(store, platform, prefix="./"):
    bot = HarnessBot(store, platform, prefix)
    async with bot:
        await bot.setup_hook()
        yield bot


async def send(bot, content, author, guild_id="1"):
    message = FakeMessage(content, author, guild_id)
    message._state = bot._connection
    await bot.process_commands(message)
    await bot.drain()
    return message.replies


def fake_user(user_id, name=None):
    return SimpleNamespace(id=int(user_id), name=name or f"user{user_id}", global_name=None, discriminator="0001")


def moderator(user_id=MODERATOR_ID):
    return FakeAuthor(user_id, permissions=discord.Permissions(ban_members=True, manage_guild=True))


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def platform():
    users = {uid: fake_user(uid) for uid in (MODERATOR_ID, TARGET_ID, ADMIN_ID, OWNER_ID, BOT_ID)}
    return FakePlatform(guilds=("1", "2", "3"), users=users)

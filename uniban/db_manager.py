"""
Database Manager
High-level access to ban, guild and permission records in the remote store
"""

from typing import Any, Dict, List, Optional

from uniban.models.ban import BanRecord
from uniban.models.guild import GuildRecord
from uniban.models.user import UserRecord


class DatabaseManager:
    def __init__(self, client):
        self.client = client

    async def initialize(self):
        await self.client.connect()

    async def close(self):
        await self.client.close()

    async def list_bans(self, **conditions) -> List[BanRecord]:
        rows = await self.client.list('bans', conditions or None)
        return [BanRecord.from_dict(row) for row in rows]

    async def query_bans(self, query: Dict[str, str]) -> List[BanRecord]:
        rows = await self.client.list('bans', query)
        return [BanRecord.from_dict(row) for row in rows]

    async def find_ban(self, user_id: str, source: str) -> Optional[BanRecord]:
        results = await self.list_bans(user=user_id, source=source)
        return results[0] if results else None

    async def create_ban(self, ban: BanRecord) -> BanRecord:
        row = await self.client.put('bans', ban.to_dict())
        if isinstance(row, dict) and 'user' in row:
            return BanRecord.from_dict(row)
        return ban

    async def set_ban_verified(self, ban: BanRecord, verified: bool):
        await self.client.update('bans', ban.id, {'verified': verified})
        ban.verified = verified

    async def remove_ban(self, ban: BanRecord):
        await self.client.remove('bans', ban.id)

    async def list_guilds(self) -> List[GuildRecord]:
        rows = await self.client.list('guilds')
        return [GuildRecord.from_dict(row) for row in rows]

    async def find_guild(self, guild_id: str) -> Optional[GuildRecord]:
        rows = await self.client.list('guilds', {'guild': guild_id})
        return GuildRecord.from_dict(rows[0]) if rows else None

    async def create_guild(self, record: GuildRecord) -> GuildRecord:
        row = await self.client.put('guilds', record.to_dict())
        if isinstance(row, dict) and 'guild' in row:
            return GuildRecord.from_dict(row)
        return record

    async def update_guild(self, record: GuildRecord, **changes: Any) -> GuildRecord:
        await self.client.update('guilds', record.id, changes)
        return record.with_changes(**changes)

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        rows = await self.client.list('users', {'user': user_id})
        return UserRecord.from_dict(rows[0]) if rows else None

    async def get_permission_level(self, user_id: str) -> int:
        user = await self.get_user(user_id)
        return user.perms if user else 0

    async def create_user(self, user_id: str, perms: int) -> UserRecord:
        record = UserRecord(user=user_id, perms=perms)
        row = await self.client.put('users', record.to_dict())
        if isinstance(row, dict) and 'user' in row:
            return UserRecord.from_dict(row)
        return record

    async def update_user_perms(self, record: UserRecord, perms: int):
        await self.client.update('users', record.id, {'perms': perms})
        record.perms = perms

    async def remove_user(self, record: UserRecord):
        await self.client.remove('users', record.id)

"""
Guild Cache
In-memory view of guild blacklist flags and compiled ban rules

Each guild maps to a single immutable entry holding both the raw record and
its compiled predicate, so the two are always replaced together.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from uniban.models.guild import DEFAULT_BAN_RULES, GuildRecord
from uniban.utils.banrules import BanPredicate, RuleError, compile_rule_text, default_predicate

logger = logging.getLogger('guild_cache')


@dataclass(frozen=True)
class CachedGuild:
    record: GuildRecord
    predicate: BanPredicate


def compile_entry(record: GuildRecord) -> CachedGuild:
    result = compile_rule_text(record.effective_banrules)
    if isinstance(result, RuleError):
        logger.warning(
            f"Stored ban rules for guild {record.guild} do not compile "
            f"({result.message}); using `{DEFAULT_BAN_RULES}`"
        )
        return CachedGuild(record, default_predicate())
    return CachedGuild(record, result.predicate)


class GuildCache:
    def __init__(self):
        self._entries: Dict[str, CachedGuild] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, guild_id: str) -> bool:
        return guild_id in self._entries

    def get(self, guild_id: str) -> Optional[CachedGuild]:
        return self._entries.get(guild_id)

    def record(self, guild_id: str) -> Optional[GuildRecord]:
        entry = self._entries.get(guild_id)
        return entry.record if entry else None

    def put(self, record: GuildRecord) -> CachedGuild:
        entry = compile_entry(record)
        self._entries[record.guild] = entry
        return entry

    def replace_all(self, records: Iterable[GuildRecord]):
        self._entries = {record.guild: compile_entry(record) for record in records}

    def is_blacklisted(self, guild_id: str) -> bool:
        entry = self._entries.get(guild_id)
        return entry is not None and entry.record.blacklisted

    def predicate_for(self, guild_id: str) -> BanPredicate:
        entry = self._entries.get(guild_id)
        if entry is None:
            return default_predicate()
        return entry.predicate

    async def recache(self, db) -> int:
        records = await db.list_guilds()
        self.replace_all(records)
        logger.info(f"Cached {len(self._entries)} guild record(s)")
        return len(self._entries)

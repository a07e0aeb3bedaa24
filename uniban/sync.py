"""
Ban Synchronization
Converges guild ban lists with the central ban records

``forward`` runs after a user's records change and pushes the correct state to
every guild. ``reverse`` runs when a guild's own ban list may have drifted and
compares it against every central record. Both are best effort: failures on
one guild/user pair are recorded and the rest of the pass carries on.
"""

import asyncio
import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Dict, List, Optional, Tuple

from uniban.errors import StoreError, UniBanError
from uniban.models.ban import BanRecord

logger = logging.getLogger('reconciler')

OWN_UNBAN_WINDOW = 30.0


class SyncAction(Enum):
    BAN = "ban"
    UNBAN = "unban"


@dataclass
class SyncOutcome:
    guild_id: str
    user_id: str
    action: SyncAction
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncReport:
    outcomes: List[SyncOutcome] = field(default_factory=list)
    skipped_guilds: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def intents(self, action: Optional[SyncAction] = None) -> List[tuple]:
        return sorted(
            (o.guild_id, o.user_id, o.action.value)
            for o in self.outcomes
            if action is None or o.action is action
        )

    @property
    def bans(self) -> int:
        return sum(1 for o in self.outcomes if o.action is SyncAction.BAN)

    @property
    def unbans(self) -> int:
        return sum(1 for o in self.outcomes if o.action is SyncAction.UNBAN)

    @property
    def failures(self) -> List[SyncOutcome]:
        return [o for o in self.outcomes if not o.ok]


class Reconciler:
    def __init__(self, db, cache, platform, concurrency: int = 8):
        self.db = db
        self.cache = cache
        self.platform = platform
        self._semaphore = asyncio.Semaphore(max(1, concurrency))
        self._own_unbans: Dict[Tuple[str, str], float] = {}

    def is_own_unban(self, guild_id: str, user_id: str) -> bool:
        """Consume the marker left by an unban this reconciler issued.

        The platform reports every unban back as an event, including ours.
        Markers older than ``OWN_UNBAN_WINDOW`` seconds are discarded.
        """
        now = time.monotonic()
        for key, issued in list(self._own_unbans.items()):
            if now - issued > OWN_UNBAN_WINDOW:
                del self._own_unbans[key]
        return self._own_unbans.pop((guild_id, user_id), None) is not None

    async def _apply(self, guild_id: str, user_id: str, action: SyncAction) -> SyncOutcome:
        outcome = SyncOutcome(guild_id, user_id, action)
        async with self._semaphore:
            try:
                if action is SyncAction.BAN:
                    await self.platform.ban(guild_id, user_id, reason="UniBan sync")
                else:
                    self._own_unbans[(guild_id, user_id)] = time.monotonic()
                    await self.platform.unban(guild_id, user_id, reason="UniBan sync")
            except UniBanError as e:
                outcome.error = str(e) or e.__class__.__name__
            except Exception as e:
                logger.warning(f"Unexpected failure applying {action.value} {guild_id}:{user_id}", exc_info=e)
                outcome.error = str(e) or e.__class__.__name__
        if outcome.error is not None and action is SyncAction.UNBAN:
            self._own_unbans.pop((guild_id, user_id), None)
        logger.debug(f"{action.value} {guild_id}:{user_id} -> {outcome.error or 'ok'}")
        return outcome

    async def _gather(self, tasks: List[Awaitable[SyncOutcome]], report: SyncReport) -> SyncReport:
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, SyncOutcome):
                report.outcomes.append(result)
            else:
                logger.warning(f"Sync task failed: {result!r}")
        return report

    async def forward(self, user_id: str) -> SyncReport:
        report = SyncReport()
        try:
            bans = await self.db.list_bans(user=user_id)
        except StoreError as e:
            logger.warning(f"Could not load bans for {user_id}: {e}")
            report.error = str(e)
            return report

        tasks = []
        for guild_id in self.platform.guild_ids():
            if self.cache.is_blacklisted(guild_id):
                report.skipped_guilds.append(guild_id)
                continue
            predicate = self.cache.predicate_for(guild_id)
            action = SyncAction.BAN if predicate.any_match(bans, guild_id) else SyncAction.UNBAN
            tasks.append(self._apply(guild_id, user_id, action))

        await self._gather(tasks, report)
        logger.info(f"Forward sync for {user_id}: {report.bans} ban(s), {report.unbans} unban(s), "
                    f"{len(report.failures)} failure(s)")
        return report

    async def reverse(self, guild_id: str) -> SyncReport:
        report = SyncReport()
        if self.cache.is_blacklisted(guild_id):
            report.skipped_guilds.append(guild_id)
            return report

        predicate = self.cache.predicate_for(guild_id)
        try:
            enforced = await self.platform.fetch_enforced_bans(guild_id)
            bans = await self.db.list_bans()
        except UniBanError as e:
            logger.warning(f"Could not reverse sync guild {guild_id}: {e}")
            report.error = str(e)
            return report

        by_user: Dict[str, List[BanRecord]] = defaultdict(list)
        for ban in bans:
            by_user[ban.user].append(ban)

        tasks = []
        for user_id, user_bans in by_user.items():
            matched = predicate.any_match(user_bans, guild_id)
            if matched and user_id not in enforced:
                tasks.append(self._apply(guild_id, user_id, SyncAction.BAN))
            elif not matched and user_id in enforced:
                tasks.append(self._apply(guild_id, user_id, SyncAction.UNBAN))

        await self._gather(tasks, report)
        logger.info(f"Reverse sync for guild {guild_id}: {report.bans} ban(s), {report.unbans} unban(s), "
                    f"{len(report.failures)} failure(s)")
        return report

import asyncio
import time

from uniban.db_manager import DatabaseManager
from uniban.guild_cache import GuildCache
from uniban.models.guild import GuildRecord
from uniban.sync import OWN_UNBAN_WINDOW, Reconciler, SyncAction

from conftest import FakePlatform, FakeStore


def make_reconciler(store, platform, guilds=()):
    cache = GuildCache()
    for record in guilds:
        cache.put(record)
    return Reconciler(DatabaseManager(store), cache, platform, concurrency=2)


def test_forward_applies_default_rules():
    store = FakeStore()
    store.add_ban("5", "spam", "1", verified=True)
    platform = FakePlatform(guilds=("1", "2"))

    report = asyncio.run(make_reconciler(store, platform).forward("5"))

    assert report.intents() == [("1", "5", "ban"), ("2", "5", "ban")]
    assert platform.enforced == {"1": {"5"}, "2": {"5"}}


def test_forward_unverified_ban_only_applies_to_source():
    store = FakeStore()
    store.add_ban("5", "spam", "1", verified=False)
    platform = FakePlatform(guilds=("1", "2"))

    report = asyncio.run(make_reconciler(store, platform).forward("5"))

    assert report.intents(SyncAction.BAN) == [("1", "5", "ban")]
    assert report.intents(SyncAction.UNBAN) == [("2", "5", "unban")]
    assert platform.enforced == {"1": {"5"}, "2": set()}
    # Unbanning someone who was never banned is absorbed as a per-target failure.
    assert [(o.guild_id, o.action) for o in report.failures] == [("2", SyncAction.UNBAN)]


def test_forward_with_no_records_unbans_everywhere():
    platform = FakePlatform(guilds=("1", "2"))
    platform.enforced["1"].add("5")

    report = asyncio.run(make_reconciler(FakeStore(), platform).forward("5"))

    assert report.unbans == 2
    assert report.bans == 0
    assert platform.enforced["1"] == set()


def test_forward_respects_reason_rules():
    store = FakeStore()
    platform = FakePlatform(guilds=("1",))
    guilds = [GuildRecord(guild="1", banrules="reason=spam|malware")]

    store.add_ban("5", "phishing", "9", verified=True)
    report = asyncio.run(make_reconciler(store, platform, guilds).forward("5"))
    assert report.intents() == [("1", "5", "unban")]

    store.add_ban("5", "spam", "8")
    report = asyncio.run(make_reconciler(store, platform, guilds).forward("5"))
    assert report.intents() == [("1", "5", "ban")]
    assert platform.enforced["1"] == {"5"}


def test_forward_skips_blacklisted_guilds():
    store = FakeStore()
    store.add_ban("5", "spam", "1", verified=True)
    platform = FakePlatform(guilds=("1", "2"))
    guilds = [GuildRecord(guild="2", blacklisted=True, banrules="all=true")]

    report = asyncio.run(make_reconciler(store, platform, guilds).forward("5"))

    assert report.skipped_guilds == ["2"]
    assert all(guild != "2" for _, guild, _ in platform.calls)


def test_forward_is_idempotent():
    store = FakeStore()
    store.add_ban("5", "spam", "1", verified=True)
    store.add_ban("5", "hate", "2")
    platform = FakePlatform(guilds=("1", "2", "3"))
    reconciler = make_reconciler(store, platform, [GuildRecord(guild="3", banrules="reason=hate")])

    first = asyncio.run(reconciler.forward("5"))
    state = {guild: set(users) for guild, users in platform.enforced.items()}
    second = asyncio.run(reconciler.forward("5"))

    assert first.intents() == second.intents()
    assert platform.enforced == state


def test_forward_isolates_failing_guilds():
    store = FakeStore()
    store.add_ban("5", "spam", "1", verified=True)
    platform = FakePlatform(guilds=("1", "2", "3"))
    platform.failing_guilds.add("2")

    report = asyncio.run(make_reconciler(store, platform).forward("5"))

    assert [o.guild_id for o in report.failures] == ["2"]
    assert platform.enforced["1"] == {"5"}
    assert platform.enforced["3"] == {"5"}


def test_forward_store_failure_issues_nothing():
    store = FakeStore()
    store.fail = True
    platform = FakePlatform(guilds=("1",))

    report = asyncio.run(make_reconciler(store, platform).forward("5"))

    assert report.error
    assert report.outcomes == []
    assert platform.calls == []


def test_reverse_bans_missing_and_unbans_stale():
    store = FakeStore()
    store.add_ban("5", "spam", "9", verified=True)
    store.add_ban("6", "spam", "9", verified=False)
    store.add_ban("7", "hate", "1", verified=False)
    platform = FakePlatform(guilds=("1",))
    platform.enforced["1"] |= {"6", "8"}

    report = asyncio.run(make_reconciler(store, platform).reverse("1"))

    assert report.intents() == [("1", "5", "ban"), ("1", "6", "unban"), ("1", "7", "ban")]
    # Users without any record are left alone.
    assert platform.enforced["1"] == {"5", "7", "8"}


def test_reverse_is_a_no_op_once_converged():
    store = FakeStore()
    store.add_ban("5", "spam", "9", verified=True)
    platform = FakePlatform(guilds=("1",))
    reconciler = make_reconciler(store, platform)

    asyncio.run(reconciler.reverse("1"))
    report = asyncio.run(reconciler.reverse("1"))

    assert report.outcomes == []


def test_reverse_skips_blacklisted_guild():
    store = FakeStore()
    store.add_ban("5", "spam", "9", verified=True)
    platform = FakePlatform(guilds=("1",))
    guilds = [GuildRecord(guild="1", blacklisted=True)]

    report = asyncio.run(make_reconciler(store, platform, guilds).reverse("1"))

    assert report.skipped_guilds == ["1"]
    assert platform.calls == []


def test_reverse_reports_unreadable_ban_list():
    store = FakeStore()
    store.add_ban("5", "spam", "9", verified=True)
    platform = FakePlatform(guilds=("1",))
    platform.failing_guilds.add("1")

    report = asyncio.run(make_reconciler(store, platform).reverse("1"))

    assert report.error == "Missing Permissions"
    assert platform.calls == []


def test_concurrency_is_bounded():
    class SlowPlatform(FakePlatform):
        active = 0
        peak = 0

        async def ban(self, guild_id, user_id, reason=None):
            SlowPlatform.active += 1
            SlowPlatform.peak = max(SlowPlatform.peak, SlowPlatform.active)
            await asyncio.sleep(0.01)
            SlowPlatform.active -= 1
            await super().ban(guild_id, user_id, reason)

    store = FakeStore()
    for user in range(6):
        store.add_ban(str(user), "spam", "9", verified=True)
    platform = SlowPlatform(guilds=("1",))

    async def run():
        reconciler = make_reconciler(store, platform)
        return await reconciler.reverse("1")

    report = asyncio.run(run())

    assert report.bans == 6
    assert SlowPlatform.peak <= 2


def test_issued_unbans_are_remembered_once():
    platform = FakePlatform(guilds=("1", "2"))
    platform.enforced["1"].add("5")
    reconciler = make_reconciler(FakeStore(), platform)

    asyncio.run(reconciler.forward("5"))

    assert reconciler.is_own_unban("1", "5")
    assert not reconciler.is_own_unban("1", "5")
    # The unban in guild 2 failed, so no event will echo it back.
    assert not reconciler.is_own_unban("2", "5")


def test_stale_unban_markers_expire():
    reconciler = make_reconciler(FakeStore(), FakePlatform(guilds=("1",)))
    reconciler._own_unbans[("1", "5")] = time.monotonic() - OWN_UNBAN_WINDOW - 1

    assert not reconciler.is_own_unban("1", "5")
    assert reconciler._own_unbans == {}

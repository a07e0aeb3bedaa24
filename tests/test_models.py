from uniban.config import BotConfig
from uniban.models.ban import BanReason, BanRecord
from uniban.models.guild import GuildRecord
from uniban.models.user import UserRecord
from uniban.utils.helpers import build_query


def test_ban_record_from_store_row():
    ban = BanRecord.from_dict({'id': 3, 'user': 42, 'reason': 'spam', 'source': 7,
                               'timestamp': 1500000000123, 'verified': 'true', 'evidence': ' '})
    assert (ban.user, ban.source, ban.verified) == ("42", "7", True)
    assert ban.evidence == "None provided"
    assert ban.banned_at_iso == "2017-07-14T02:40:00.123Z"
    assert ban.to_dict()['id'] == 3


def test_reason_vocabulary():
    assert BanReason.is_valid("banevasion")
    assert not BanReason.is_valid("BanEvasion")
    assert len(BanReason.values()) == 11


def test_guild_record_defaults():
    record = GuildRecord.from_dict({'guild': 9, 'blacklisted': 'false', 'banrules': None})
    assert record.guild == "9"
    assert record.blacklisted is False
    assert record.effective_banrules == "verified=true"
    changed = record.with_changes(banrules="all=true")
    assert changed.effective_banrules == "all=true"
    assert record.banrules == ""


def test_user_record():
    record = UserRecord.from_dict({'id': 1, 'user': 5, 'perms': '3'})
    assert record.to_dict() == {'user': '5', 'perms': 3, 'id': 1}


def test_build_query():
    assert build_query(["reason=spam", "limit=3"]) == {'reason': 'spam', 'limit': '3'}
    assert build_query(["reason"]) is None
    assert build_query(["=spam"]) is None


def test_config_from_env(monkeypatch):
    monkeypatch.setenv('UB_TOKEN', 'abc')
    monkeypatch.setenv('UB_PREFIX', '!')
    monkeypatch.setenv('UB_SYNC_CONCURRENCY', '3')
    monkeypatch.setenv('UB_LOG_LEVEL', 'debug')
    monkeypatch.setenv('SHARD_IDS', '0, 2')
    monkeypatch.delenv('UB_DB_URL', raising=False)
    monkeypatch.delenv('SHARD_COUNT', raising=False)

    config = BotConfig.from_env()

    assert config.token == 'abc'
    assert config.prefix == '!'
    assert config.sync_concurrency == 3
    assert config.log_level == 'DEBUG'
    assert config.db_url == "http://localhost:8080"
    assert config.shard_ids == [0, 2]
    assert config.shard_count is None

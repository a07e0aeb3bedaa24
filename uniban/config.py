"""
Bot Configuration
Settings read from the environment (optionally via a .env file)
"""

import os
from dataclasses import dataclass
from typing import List, Optional


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


@dataclass
class BotConfig:
    token: Optional[str] = None
    db_url: str = "http://localhost:8080"
    db_user: Optional[str] = None
    db_pass: Optional[str] = None
    db_timeout: float = 10.0
    prefix: str = "./"
    sync_concurrency: int = 8
    log_level: str = "INFO"
    log_file: Optional[str] = "data/logs/bot.log"
    shard_count: Optional[int] = None
    shard_ids: Optional[List[int]] = None

    @classmethod
    def from_env(cls) -> 'BotConfig':
        shard_ids_str = os.getenv('SHARD_IDS')
        shard_count = os.getenv('SHARD_COUNT')

        return cls(
            token=os.getenv('UB_TOKEN'),
            db_url=os.getenv('UB_DB_URL', cls.db_url),
            db_user=os.getenv('UB_DB_USER'),
            db_pass=os.getenv('UB_DB_PASS'),
            db_timeout=_float_env('UB_DB_TIMEOUT', cls.db_timeout),
            prefix=os.getenv('UB_PREFIX', cls.prefix),
            sync_concurrency=_int_env('UB_SYNC_CONCURRENCY', cls.sync_concurrency),
            log_level=os.getenv('UB_LOG_LEVEL', cls.log_level).upper(),
            log_file=os.getenv('UB_LOG_FILE', cls.log_file) or None,
            shard_count=int(shard_count) if shard_count else None,
            shard_ids=[int(x.strip()) for x in shard_ids_str.split(',')] if shard_ids_str else None
        )

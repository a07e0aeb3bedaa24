"""
Data Models for UniBan
Defines the records exchanged with the remote store
"""

from .ban import BanRecord, BanReason, NO_EVIDENCE, epoch_millis
from .guild import GuildRecord, DEFAULT_BAN_RULES
from .user import UserRecord

__all__ = [
    'BanRecord',
    'BanReason',
    'NO_EVIDENCE',
    'epoch_millis',
    'GuildRecord',
    'DEFAULT_BAN_RULES',
    'UserRecord'
]

"""
UniBan Cogs
Command modules registered with the application
"""

from .base import UniBanCog
from .admin import AdminCog
from .records import RecordsCog
from .moderation import ModerationCog
from .utility import UtilityCog

__all__ = [
    'UniBanCog',
    'AdminCog',
    'RecordsCog',
    'ModerationCog',
    'UtilityCog'
]

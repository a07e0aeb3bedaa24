"""
Remote Record Store Access
HTTP client for the bans, guilds and users collections
"""

from .http_client import RecordStoreClient, COLLECTIONS

__all__ = [
    'RecordStoreClient',
    'COLLECTIONS'
]

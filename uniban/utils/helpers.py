"""
Helper Functions
Small parsing and formatting helpers used by the cogs
"""

from typing import Dict, Optional, Sequence


def build_query(entries: Sequence[str]) -> Optional[Dict[str, str]]:
    query = {}
    for entry in entries:
        key, sep, value = entry.partition('=')
        if not sep or not key:
            return None
        query[key] = value
    return query


def truncate_string(
    text: str,
    max_length: int,
    suffix: str = "..."
) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix

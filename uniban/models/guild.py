"""
Guild Models
Per-guild synchronization settings as stored remotely
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from uniban.models.ban import coerce_bool


DEFAULT_BAN_RULES = "verified=true"


@dataclass(frozen=True)
class GuildRecord:
    guild: str
    blacklisted: bool = False
    banrules: str = ""
    id: Optional[Any] = None

    @property
    def effective_banrules(self) -> str:
        if self.banrules and self.banrules.strip():
            return self.banrules
        return DEFAULT_BAN_RULES

    def with_changes(self, **changes) -> 'GuildRecord':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'guild': self.guild,
            'blacklisted': self.blacklisted,
            'banrules': self.banrules
        }
        if self.id is not None:
            data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GuildRecord':
        return cls(
            id=data.get('id'),
            guild=str(data['guild']),
            blacklisted=coerce_bool(data.get('blacklisted', False)),
            banrules=data.get('banrules') or ""
        )

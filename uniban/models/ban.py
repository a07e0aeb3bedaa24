"""
Ban Models
Central ban records and the fixed reason vocabulary
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
import time


NO_EVIDENCE = "None provided"


class BanReason(Enum):
    SPAM = "spam"
    POWER_ABUSE = "powerabuse"
    THREATS = "threats"
    HARASSMENT = "harassment"
    HATE = "hate"
    MALWARE = "malware"
    PHISHING = "phishing"
    VULGARITY = "vulgarity"
    BAN_EVASION = "banevasion"
    IMPERSONATION = "impersonation"
    ADVERTISING = "advertising"

    @classmethod
    def values(cls) -> list:
        return [reason.value for reason in cls]

    @classmethod
    def is_valid(cls, value: str) -> bool:
        return value in cls._value2member_map_


def coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class BanRecord:
    user: str
    reason: str
    source: str
    timestamp: int = field(default_factory=epoch_millis)
    verified: bool = False
    evidence: str = NO_EVIDENCE
    id: Optional[Any] = None

    def __post_init__(self):
        if not self.evidence or not self.evidence.strip():
            self.evidence = NO_EVIDENCE

    @property
    def banned_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    @property
    def banned_at_iso(self) -> str:
        return self.banned_at.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'user': self.user,
            'reason': self.reason,
            'source': self.source,
            'timestamp': self.timestamp,
            'verified': self.verified,
            'evidence': self.evidence
        }
        if self.id is not None:
            data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BanRecord':
        return cls(
            id=data.get('id'),
            user=str(data['user']),
            reason=data.get('reason', ''),
            source=str(data.get('source', '')),
            timestamp=int(data.get('timestamp') or 0),
            verified=coerce_bool(data.get('verified', False)),
            evidence=data.get('evidence') or NO_EVIDENCE
        )

"""
User Models
Administrative permission rows
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class UserRecord:
    user: str
    perms: int
    id: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'user': self.user,
            'perms': self.perms
        }
        if self.id is not None:
            data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserRecord':
        return cls(
            id=data.get('id'),
            user=str(data['user']),
            perms=int(data.get('perms', 0))
        )

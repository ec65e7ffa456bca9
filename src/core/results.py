"""
Mutation results for room operations.

Every mutating room operation reports what happened instead of silently
skipping, so callers can tell success from "nothing to do" from failure.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MutationStatus(Enum):
    """Outcome of a mutating room operation."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    PLAYER_NOT_FOUND = "player_not_found"
    LOCKED = "locked"
    FULL = "full"
    NOT_A_PARTICIPANT = "not_a_participant"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class MutationResult:
    status: MutationStatus
    room_id: str
    changed: bool = False
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == MutationStatus.SUCCESS

    @classmethod
    def success(cls, room_id: str, changed: bool = True) -> 'MutationResult':
        return cls(MutationStatus.SUCCESS, room_id, changed)

    @classmethod
    def not_found(cls, room_id: str, message: Optional[str] = None) -> 'MutationResult':
        return cls(MutationStatus.NOT_FOUND, room_id, False, message)

    @classmethod
    def player_not_found(cls, room_id: str, player_id: str) -> 'MutationResult':
        return cls(MutationStatus.PLAYER_NOT_FOUND, room_id, False, f"Player {player_id} not found")

    @classmethod
    def rejected(cls, status: MutationStatus, room_id: str, message: Optional[str] = None) -> 'MutationResult':
        return cls(status, room_id, False, message)

    def to_dict(self):
        return {
            'status': self.status.value,
            'room_id': self.room_id,
            'changed': self.changed,
            'message': self.message,
        }

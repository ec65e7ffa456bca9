"""
Core data model for PokerPlan

Rooms embed their participants; players live in their own directory and are
referenced from participants by internal document id.
"""

import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List


def new_doc_id() -> str:
    """Generate an internal document id."""
    return uuid.uuid4().hex


@dataclass
class Player:
    """A player identity bound to an opaque session identifier."""
    player_id: str
    name: str
    session_id: str
    doc_id: str = field(default_factory=new_doc_id)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'player_id': self.player_id,
            'name': self.name,
            'created_at': self.created_at.isoformat(),
        }


@dataclass
class Participant:
    """A player's membership in a room. An empty vote means "no vote"."""
    player_doc_id: str
    vote: str = ''
    is_admin: bool = False
    is_allowed_vote: bool = True
    joined_at: datetime = field(default_factory=datetime.now)

    @property
    def has_voted(self) -> bool:
        return self.vote != ''


@dataclass
class RoomPermissions:
    """Per-room permissions chosen by the creator."""
    player_reveal: bool = False
    player_change_vote: bool = False
    player_add_ticket: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


@dataclass
class Room:
    """
    A planning poker room.

    Participants are keyed by the player's internal doc id; dict insertion
    order is the join order.
    """
    room_id: str
    pretty_name: str
    vote_system: str
    is_locked: bool = False
    is_revealed: bool = False
    current_story_url: str = ''
    participants: Dict[str, Participant] = field(default_factory=dict)
    permissions: RoomPermissions = field(default_factory=RoomPermissions)
    doc_id: str = field(default_factory=new_doc_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def participant_list(self) -> List[Participant]:
        """Participants in join order."""
        return list(self.participants.values())

    def get_participant(self, player_doc_id: str):
        return self.participants.get(player_doc_id)

    def has_participant(self, player_doc_id: str) -> bool:
        return player_doc_id in self.participants

    @property
    def admin_ids(self) -> List[str]:
        return [doc_id for doc_id, participant in self.participants.items() if participant.is_admin]

    def touch(self) -> None:
        self.updated_at = datetime.now()

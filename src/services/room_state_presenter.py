"""
Room State Presenter - Centralized room state transformation for clients.

This service provides canonical transformations for room data that is sent to
clients, ensuring consistent payload shapes and that votes stay hidden until
the room is revealed.
"""

import logging
import math
from collections import Counter
from typing import Any, Dict, List, Optional

from src.core.models import Player, Room

logger = logging.getLogger(__name__)


class RoomStatePresenter:
    """Centralized service for transforming room data for client consumption."""

    def __init__(self, player_directory):
        """Initialize the room state presenter.

        Args:
            player_directory: Player directory used to resolve participant names
        """
        self.player_directory = player_directory

    def create_room_state(self, room: Room, viewer: Optional[Player] = None) -> Dict[str, Any]:
        """Create the client view of a room.

        Args:
            room: Room record
            viewer: Player the payload is for; their own vote is always included

        Returns:
            Dict safe to send to any participant
        """
        return {
            'room_id': room.room_id,
            'pretty_name': room.pretty_name,
            'vote_system': room.vote_system,
            'is_locked': room.is_locked,
            'is_revealed': room.is_revealed,
            'current_story_url': room.current_story_url,
            'permissions': room.permissions.to_dict(),
            'participants': self.create_participant_list(room, viewer),
            'vote_summary': self.create_vote_summary(room) if room.is_revealed else None,
            'created_at': room.created_at.isoformat(),
            'updated_at': room.updated_at.isoformat(),
        }

    def create_participant_list(self, room: Room, viewer: Optional[Player] = None) -> List[Dict[str, Any]]:
        """Participants in join order, with votes masked unless revealed."""
        players = self.player_directory.get_many_by_doc_ids(room.participants.keys())
        viewer_doc_id = viewer.doc_id if viewer else None

        participant_list = []
        for doc_id, participant in room.participants.items():
            player = players.get(doc_id)
            if player is None:
                logger.warning(f"Room {room.room_id} references unknown player {doc_id}")

            show_vote = room.is_revealed or doc_id == viewer_doc_id
            participant_list.append({
                'player_id': player.player_id if player else None,
                'name': player.name if player else None,
                'is_admin': participant.is_admin,
                'is_allowed_vote': participant.is_allowed_vote,
                'has_voted': participant.has_voted,
                'vote': participant.vote if show_vote else None,
                'is_you': doc_id == viewer_doc_id,
            })

        return participant_list

    def create_vote_summary(self, room: Room) -> Dict[str, Any]:
        """Tally revealed votes. The average only covers finite numeric cards."""
        votes = [p.vote for p in room.participants.values() if p.is_allowed_vote and p.has_voted]
        numeric = []
        for vote in votes:
            try:
                value = float(vote)
            except ValueError:
                continue
            # "nan", "inf" and overflowing literals parse but are not JSON numbers
            if math.isfinite(value):
                numeric.append(value)

        return {
            'total_votes': len(votes),
            'counts': dict(Counter(votes)),
            'average': round(sum(value / len(numeric) for value in numeric), 2) if numeric else None,
        }

    def create_room_removed(self, room_id: str) -> Dict[str, Any]:
        return {'room_id': room_id, 'removed': True}

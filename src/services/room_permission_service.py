"""
Room Permission Service for PokerPlan

Decides which participants may perform which room actions, based on the
participant's role and the permissions chosen when the room was created.
"""

import logging
from enum import Enum
from typing import Optional

from src.core.errors import ErrorCode, ValidationError
from src.core.models import Player, Room

logger = logging.getLogger(__name__)


class RoomAction(Enum):
    """Actions that need authorization."""
    UPDATE_LOCK = "update_lock"
    UPDATE_REVEAL = "update_reveal"
    UPDATE_STORY_URL = "update_story_url"
    REMOVE_ROOM = "remove_room"
    ADD_OTHER_PARTICIPANT = "add_other_participant"
    CHANGE_REVEALED_VOTE = "change_revealed_vote"


class RoomPermissionService:
    """Role and permission checks for room actions."""

    def is_admin(self, room: Room, player: Optional[Player]) -> bool:
        if player is None:
            return False
        participant = room.get_participant(player.doc_id)
        return bool(participant and participant.is_admin)

    def is_participant(self, room: Room, player: Optional[Player]) -> bool:
        return player is not None and room.has_participant(player.doc_id)

    def can_perform(self, room: Room, player: Optional[Player], action: RoomAction) -> bool:
        """
        Check whether a player may perform an action on a room.

        Admins may do everything. Other participants may reveal or set the
        story URL only if the room allows it, and may change a vote after the
        reveal only if the room allows it.
        """
        if action == RoomAction.CHANGE_REVEALED_VOTE:
            return room.permissions.player_change_vote or self.is_admin(room, player)

        if self.is_admin(room, player):
            return True

        if not self.is_participant(room, player):
            return False

        if action == RoomAction.UPDATE_REVEAL:
            return room.permissions.player_reveal
        if action == RoomAction.UPDATE_STORY_URL:
            return room.permissions.player_add_ticket

        return False

    def require(self, room: Room, player: Optional[Player], action: RoomAction) -> None:
        """
        Raise if the player may not perform the action.

        Raises:
            ValidationError: VOTE_LOCKED for revealed votes, PERMISSION_DENIED otherwise
        """
        if self.can_perform(room, player, action):
            return

        player_ref = player.player_id if player else 'anonymous'
        logger.warning(f"Denied {action.value} on room {room.room_id} for player {player_ref}")

        if action == RoomAction.CHANGE_REVEALED_VOTE:
            raise ValidationError(
                ErrorCode.VOTE_LOCKED,
                'Votes cannot be changed after they are revealed',
                {'room_id': room.room_id}
            )

        raise ValidationError(
            ErrorCode.PERMISSION_DENIED,
            f'You are not allowed to {action.value.replace("_", " ")} in this room',
            {'room_id': room.room_id, 'action': action.value}
        )

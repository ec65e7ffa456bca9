"""
Room Action Handler

This module handles Socket.IO events that change a room's flags and votes:
locking, revealing, setting the current story, and casting votes.
"""

import logging

from src.services.error_response_factory import with_error_handling
from src.services.rate_limit_service import prevent_event_overflow
from src.services.room_permission_service import RoomAction
from .base_handler import BaseRoomHandler

logger = logging.getLogger(__name__)


class RoomActionHandler(BaseRoomHandler):
    """Handler for in-room actions performed by participants."""

    def _authorize(self, room_id: str, action: RoomAction):
        """Resolve the acting player and check they may perform the action."""
        player = self.require_player()
        room = self.get_room_or_raise(room_id)
        self.permission_service.require(room, player, action)
        return player, room

    def _finish(self, event_name: str, room_id: str, result, payload: dict):
        payload['room_id'] = room_id
        payload['changed'] = result.changed
        self.emit_success(event_name, payload)
        if result.changed:
            self.broadcast_service.broadcast_room_update(room_id)

    @prevent_event_overflow('update_lock')
    @with_error_handling
    def handle_update_lock(self, data):
        """
        Handle locking or unlocking a room. Admin only.

        Expected data format:
        {
            'room_id': 'sprint-12',
            'is_locked': True
        }
        """
        self.log_handler_start('handle_update_lock', data)
        validated_data = self.validate_data_dict(data, ['room_id', 'is_locked'])
        room_id = self.validation_service.validate_room_id(validated_data['room_id'])
        is_locked = self.validation_service.validate_flag(validated_data['is_locked'], 'is_locked')

        self._authorize(room_id, RoomAction.UPDATE_LOCK)
        result = self.require_success(self.room_manager.update_lock(room_id, is_locked))

        self._finish('lock_updated', room_id, result, {'is_locked': is_locked})

    @prevent_event_overflow('update_reveal')
    @with_error_handling
    def handle_update_reveal(self, data):
        """Handle revealing or hiding votes."""
        self.log_handler_start('handle_update_reveal', data)
        validated_data = self.validate_data_dict(data, ['room_id', 'is_revealed'])
        room_id = self.validation_service.validate_room_id(validated_data['room_id'])
        is_revealed = self.validation_service.validate_flag(validated_data['is_revealed'], 'is_revealed')

        self._authorize(room_id, RoomAction.UPDATE_REVEAL)
        result = self.require_success(self.room_manager.update_reveal(room_id, is_revealed))

        self._finish('reveal_updated', room_id, result, {'is_revealed': is_revealed})

    @prevent_event_overflow('update_story_url')
    @with_error_handling
    def handle_update_story_url(self, data):
        self.log_handler_start('handle_update_story_url', data)
        validated_data = self.validate_data_dict(data, ['room_id', 'current_story_url'])
        room_id = self.validation_service.validate_room_id(validated_data['room_id'])
        story_url = self.validation_service.validate_story_url(validated_data['current_story_url'])

        self._authorize(room_id, RoomAction.UPDATE_STORY_URL)
        result = self.require_success(self.room_manager.update_current_story_url(room_id, story_url))

        self._finish('story_url_updated', room_id, result, {'current_story_url': story_url})

    @prevent_event_overflow('cast_vote')
    @with_error_handling
    def handle_cast_vote(self, data):
        """
        Handle a participant casting, changing, or withdrawing (empty vote) their vote.

        Once votes are revealed, changing a vote needs the room's
        player_change_vote permission.

        Expected data format:
        {
            'room_id': 'sprint-12',
            'vote': '5'
        }
        """
        self.log_handler_start('handle_cast_vote', data)
        validated_data = self.validate_data_dict(data, ['room_id', 'vote'])
        room_id = self.validation_service.validate_room_id(validated_data['room_id'])
        vote = self.validation_service.validate_vote(validated_data['vote'])

        player = self.require_player()
        room = self.get_room_or_raise(room_id)
        if room.is_revealed:
            self.permission_service.require(room, player, RoomAction.CHANGE_REVEALED_VOTE)

        result = self.require_success(self.room_manager.cast_vote(room_id, player.player_id, vote))

        self.log_handler_success('handle_cast_vote', f'Player {player.player_id} voted in room {room_id}')
        self._finish('vote_cast', room_id, result, {'has_voted': bool(vote)})

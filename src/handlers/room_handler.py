"""
Room Handler

This module handles Socket.IO events that look up, create, remove, join,
and watch rooms.
"""

import logging
from flask import request

from src.services.error_response_factory import with_error_handling
from src.services.rate_limit_service import prevent_event_overflow
from src.services.room_permission_service import RoomAction
from .base_handler import BaseRoomHandler

logger = logging.getLogger(__name__)


class RoomHandler(BaseRoomHandler):
    """Handler for room lookup, lifecycle, and membership events."""

    def _validated_room_id(self, data, required_fields=None):
        validated_data = self.validate_data_dict(data, required_fields or ['room_id'])
        return validated_data, self.validation_service.validate_room_id(validated_data['room_id'])

    @prevent_event_overflow('get_room')
    @with_error_handling
    def handle_get_room(self, data):
        """
        Handle a one-off room state request.

        Expected data format:
        {
            'room_id': 'sprint-12'
        }
        """
        self.log_handler_start('handle_get_room', data)
        _, room_id = self._validated_room_id(data)

        room = self.get_room_or_raise(room_id)
        self.emit_success('room_state', {'room': self.present_room(room, self.get_current_player())})

    @prevent_event_overflow('watch_room')
    @with_error_handling
    def handle_watch_room(self, data):
        """Send the room state now and subscribe to room_updated broadcasts."""
        self.log_handler_start('handle_watch_room', data)
        _, room_id = self._validated_room_id(data)
        self.require_session()

        room = self.get_room_or_raise(room_id)
        self.watch(room_id)
        self.emit_success('room_state', {'room': self.present_room(room, self.get_current_player())})

        self.log_handler_success('handle_watch_room', f'watching {room_id}')

    @with_error_handling
    def handle_unwatch_room(self, data):
        self.log_handler_start('handle_unwatch_room', data)
        _, room_id = self._validated_room_id(data)

        was_watching = self.unwatch(room_id)
        self.emit_success('room_unwatched', {'room_id': room_id, 'was_watching': was_watching})

    @prevent_event_overflow('create_room')
    @with_error_handling
    def handle_create_room(self, data):
        """
        Handle room creation. The creating player becomes the room's admin and
        starts watching it.

        Expected data format:
        {
            'room_name': 'Sprint 12',
            'vote_system': 'fibonacci',
            'player_reveal': False,
            'player_change_vote': False,
            'player_add_ticket': False
        }
        """
        self.log_handler_start('handle_create_room', data)

        validated_data = self.validate_data_dict(data, ['room_name'])
        room_name = self.validation_service.validate_room_name(validated_data['room_name'])
        vote_system = self.validation_service.validate_vote_system(validated_data.get('vote_system'))
        flags = {
            flag: self.validation_service.validate_flag(validated_data.get(flag), flag, default=False)
            for flag in ('player_reveal', 'player_change_vote', 'player_add_ticket')
        }

        session_id = self.require_session()
        room_id = self.room_manager.create_room(room_name, vote_system, session_id=session_id, **flags)

        room = self.get_room_or_raise(room_id)
        self.watch(room_id)

        self.log_handler_success('handle_create_room', f'Created room {room_id} ({room_name})')
        self.emit_success('room_created', {
            'room_id': room_id,
            'room': self.present_room(room, self.get_current_player())
        })

    @prevent_event_overflow('remove_room')
    @with_error_handling
    def handle_remove_room(self, data):
        """Handle room removal. Admin only."""
        self.log_handler_start('handle_remove_room', data)
        _, room_id = self._validated_room_id(data)

        player = self.require_player()
        room = self.get_room_or_raise(room_id)
        self.permission_service.require(room, player, RoomAction.REMOVE_ROOM)

        self.require_success(self.room_manager.remove_room(room_id))

        self.broadcast_service.broadcast_room_removed(room_id, skip_sid=request.sid)
        self.session_service.drop_room(room_id)

        self.log_handler_success('handle_remove_room', f'Removed room {room_id}')
        self.emit_success('room_removed', {'room_id': room_id})

    @prevent_event_overflow('join_room')
    @with_error_handling
    def handle_join_room(self, data):
        """
        Handle the acting player joining a room as a participant.

        Joining a room the player is already in succeeds without changes.
        """
        self.log_handler_start('handle_join_room', data)
        _, room_id = self._validated_room_id(data)

        player = self.require_player()
        result = self.require_success(self.room_manager.add_participant(room_id, player.player_id))

        self.watch(room_id)
        room = self.get_room_or_raise(room_id)

        self.log_handler_success('handle_join_room', f'Player {player.name} ({player.player_id}) in room {room_id}')
        self.emit_success('room_joined', {
            'room_id': room_id,
            'changed': result.changed,
            'room': self.present_room(room, player)
        })

        if result.changed:
            self.broadcast_service.broadcast_room_update(room_id)

    @prevent_event_overflow('add_participant')
    @with_error_handling
    def handle_add_participant(self, data):
        """
        Handle adding a player to a room by id. Adding someone else needs admin rights.

        Expected data format:
        {
            'room_id': 'sprint-12',
            'player_id': 'a1b2c3'
        }
        """
        self.log_handler_start('handle_add_participant', data)
        validated_data, room_id = self._validated_room_id(data, ['room_id', 'player_id'])
        target_player_id = self.validation_service.validate_player_id(validated_data['player_id'])

        player = self.require_player()
        room = self.get_room_or_raise(room_id)
        if target_player_id != player.player_id:
            self.permission_service.require(room, player, RoomAction.ADD_OTHER_PARTICIPANT)

        result = self.require_success(self.room_manager.add_participant(room_id, target_player_id))

        logger.info(f'Player {player.player_id} added {target_player_id} to room {room_id} '
                    f'(changed={result.changed}, client={request.sid})')
        self.emit_success('participant_added', {
            'room_id': room_id,
            'player_id': target_player_id,
            'changed': result.changed
        })

        if result.changed:
            self.broadcast_service.broadcast_room_update(room_id)

"""
Player Handler

This module handles Socket.IO events that create and look up the player
bound to the requesting session.
"""

import logging

from src.core.errors import ErrorCode, ValidationError
from src.services.error_response_factory import with_error_handling
from src.services.rate_limit_service import prevent_event_overflow
from .base_handler import BaseHandler

logger = logging.getLogger(__name__)


class PlayerHandler(BaseHandler):
    """Handler for player identity events."""

    @prevent_event_overflow('create_player')
    @with_error_handling
    def handle_create_player(self, data):
        """
        Handle creating (or renaming) the session's player.

        Expected data format:
        {
            'name': 'Ada',
            'player_id': 'optional-external-id'
        }
        """
        self.log_handler_start('handle_create_player', data)

        validated_data = self.validate_data_dict(data, ['name'])
        name = self.validation_service.validate_player_name(validated_data['name'])
        player_id = validated_data.get('player_id')
        if player_id is not None:
            player_id = self.validation_service.validate_player_id(player_id)

        session_id = self.require_session()
        try:
            player = self.player_directory.create_player(session_id, name, player_id)
        except ValueError as e:
            raise ValidationError(
                ErrorCode.PLAYER_ID_TAKEN,
                str(e),
                {'player_id': player_id}
            )

        self.log_handler_success('handle_create_player', f'{player.name} ({player.player_id})')
        self.emit_success('player_created', {'player': player.to_dict()})

    @with_error_handling
    def handle_get_current_player(self, data=None):
        self.log_handler_start('handle_get_current_player', data)
        self.require_session()

        player = self.get_current_player()
        self.emit_success('current_player', {'player': player.to_dict() if player else None})

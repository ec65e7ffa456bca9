"""
Base Handler Classes

This module provides base classes for Socket.IO handlers with common patterns
for validation, error handling, session and player resolution, and response formatting.
"""

import logging
from typing import Any, Dict, Optional
from flask import request
from flask_socketio import emit, join_room, leave_room

from config_factory import get_config
from container import get_container
from src.core.errors import ErrorCode, ValidationError
from src.core.models import Player, Room
from src.core.results import MutationResult

logger = logging.getLogger(__name__)


class BaseHandler:
    """
    Base class for all Socket.IO handlers.

    Provides common functionality like service access, session and player
    resolution, validation patterns, and standardized response formatting.
    """

    def __init__(self):
        self._container = get_container()

    @property
    def room_manager(self):
        """Get the room manager service."""
        return self._container.get('RoomManager')

    @property
    def player_directory(self):
        """Get the player directory service."""
        return self._container.get('PlayerDirectoryService')

    @property
    def session_service(self):
        """Get the session service."""
        return self._container.get('SessionService')

    @property
    def validation_service(self):
        """Get the validation service."""
        return self._container.get('ValidationService')

    @property
    def error_response_factory(self):
        """Get the error response factory service."""
        return self._container.get('ErrorResponseFactory')

    @property
    def broadcast_service(self):
        """Get the broadcast service."""
        return self._container.get('BroadcastService')

    @property
    def room_state_presenter(self):
        return self._container.get('RoomStatePresenter')

    @property
    def permission_service(self):
        return self._container.get('RoomPermissionService')

    @property
    def app_config(self):
        """Get the app configuration."""
        return get_config()

    def get_current_session_id(self) -> Optional[str]:
        """Get the session id bound to the requesting connection."""
        return self.session_service.get_session_id(request.sid)  # type: ignore[attr-defined]

    def require_session(self) -> str:
        """
        Get the current session id, raising an error if the connection has none.

        Raises:
            ValidationError: If the connection is not bound to a session
        """
        session_id = self.get_current_session_id()
        if not session_id:
            raise ValidationError(
                ErrorCode.NO_SESSION,
                'No session is bound to this connection'
            )
        return session_id

    def get_current_player(self) -> Optional[Player]:
        return self.session_service.get_current_player(request.sid)  # type: ignore[attr-defined]

    def require_player(self) -> Player:
        """
        Get the player acting on this connection.

        Raises:
            ValidationError: If the session has no player yet
        """
        session_id = self.require_session()
        player = self.session_service.get_player_for_session(session_id)
        if player is None:
            raise ValidationError(
                ErrorCode.PLAYER_NOT_FOUND,
                'Create a player before using rooms',
                {'session_id': session_id}
            )
        return player

    def get_room_or_raise(self, room_id: str) -> Room:
        room = self.room_manager.get_room(room_id)
        if room is None:
            raise ValidationError(
                ErrorCode.ROOM_NOT_FOUND,
                f'Room {room_id} not found',
                {'room_id': room_id}
            )
        return room

    def require_success(self, result: MutationResult) -> MutationResult:
        """
        Turn an unsuccessful mutation result into a ValidationError.

        Raises:
            ValidationError: If the mutation did not succeed
        """
        if not result.ok:
            raise self.error_response_factory.error_for_mutation(result)
        return result

    def validate_data_dict(self, data: Any, required_fields: Optional[list] = None) -> Dict[str, Any]:
        """
        Validate that data is a dictionary and contains required fields.

        Raises:
            ValidationError: If validation fails
        """
        return self.validation_service.validate_socket_data(data, required_fields)

    def present_room(self, room: Room, viewer: Optional[Player] = None) -> Dict[str, Any]:
        return self.room_state_presenter.create_room_state(room, viewer)

    def emit_success(self, event_name: str, data: Optional[Dict[str, Any]] = None) -> None:
        """
        Emit a success response to the requesting client.

        Args:
            event_name: The name of the event to emit
            data: Optional data to include in the response
        """
        response = self.error_response_factory.create_success_response(data or {})
        emit(event_name, response)

    def emit_error(self, event_name: str, error_code: ErrorCode, message: str) -> None:
        """
        Emit an error response to the requesting client.

        Args:
            event_name: The name of the event to emit
            error_code: The error code
            message: The error message
        """
        response = self.error_response_factory.create_error_response(error_code, message)
        emit(event_name, response)

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        """Log the start of handler execution."""
        logger.info(f'{handler_name} called by client: {request.sid}')  # type: ignore[attr-defined]
        if data:
            logger.debug(f'{handler_name} data: {data}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        """Log successful handler completion."""
        log_msg = f'{handler_name} completed successfully for client: {request.sid}'  # type: ignore[attr-defined]
        if message:
            log_msg += f' - {message}'
        logger.info(log_msg)


class RoomHandlerMixin:
    """
    Mixin for handlers that deal with room operations.

    Subscribes the requesting connection to live updates for a room.
    """

    session_service: Any

    def watch(self, room_id: str) -> None:
        """Join the Socket.IO room and record the watch for per-viewer updates."""
        join_room(room_id)
        self.session_service.watch_room(request.sid, room_id)  # type: ignore[attr-defined]
        logger.debug(f'Client {request.sid} is watching room: {room_id}')  # type: ignore[attr-defined]

    def unwatch(self, room_id: str) -> bool:
        leave_room(room_id)
        return self.session_service.unwatch_room(request.sid, room_id)  # type: ignore[attr-defined]


class BaseRoomHandler(BaseHandler, RoomHandlerMixin):
    """Base class for handlers that deal with room operations."""
    pass

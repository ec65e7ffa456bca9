"""
Broadcast Service - Centralized Socket.IO message broadcasting.

This service handles all Socket.IO emissions in a centralized way:
- Room-wide broadcasts
- Individual connection messages
- Per-viewer room state updates
"""

import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class BroadcastService:
    """Centralized service for all Socket.IO broadcasting operations."""

    def __init__(self, socketio, room_manager, room_state_presenter, session_service):
        """Initialize the broadcast service.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            room_manager: Room management service
            room_state_presenter: Presenter producing client payloads
            session_service: Session service used to find room watchers
        """
        self.socketio = socketio
        self.room_manager = room_manager
        self.room_state_presenter = room_state_presenter
        self.session_service = session_service

    # Core emission methods

    def emit_to_room(self, event: str, data: Dict[str, Any], room_id: str, skip_sid: Optional[str] = None):
        """Emit an event to every connection in a Socket.IO room, optionally skipping one."""
        try:
            self.socketio.emit(event, data, room=room_id, skip_sid=skip_sid)
            logger.debug(f'Emitted {event} to room {room_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to room {room_id}: {e}')

    def emit_to_player(self, event: str, data: Dict[str, Any], socket_id: str):
        """Emit an event to a specific connection."""
        try:
            self.socketio.emit(event, data, room=socket_id)
            logger.debug(f'Emitted {event} to connection {socket_id}')
        except Exception as e:
            logger.error(f'Error emitting {event} to connection {socket_id}: {e}')

    # High-level broadcast methods

    def broadcast_room_update(self, room_id: str) -> int:
        """Send each watcher of a room its own view of the room state.

        Votes are masked per viewer, so this cannot be a single room-wide emit.

        Returns:
            Number of connections notified
        """
        room = self.room_manager.get_room(room_id)
        if room is None:
            logger.debug(f'Skipped room update for missing room {room_id}')
            return 0

        watchers = self.session_service.get_watchers(room_id)
        for socket_id in watchers:
            viewer = self.session_service.get_current_player(socket_id)
            room_state = self.room_state_presenter.create_room_state(room, viewer)
            self.emit_to_player('room_updated', room_state, socket_id)

        logger.debug(f'Broadcasted room update to {len(watchers)} watchers of room {room_id}')
        return len(watchers)

    def broadcast_room_removed(self, room_id: str, skip_sid: Optional[str] = None):
        """Tell everyone watching a room that it is gone, then close its Socket.IO channel."""
        self.emit_to_room('room_closed', self.room_state_presenter.create_room_removed(room_id), room_id, skip_sid)
        try:
            self.socketio.close_room(room_id)
        except Exception as e:
            logger.error(f'Error closing Socket.IO room {room_id}: {e}')

"""
Socket.IO event handlers for PokerPlan.

This module provides the main registration function and connection/disconnection
handlers, wiring handler classes to events through the event router.
"""

import logging
import uuid
from flask import request
from flask_socketio import emit

from config_factory import get_config
from container import get_container
from src.core.errors import ValidationError
from src.services.rate_limit_service import get_event_queue_manager
from .socket_event_router import setup_router
from .player_handler import PlayerHandler
from .room_handler import RoomHandler
from .room_action_handler import RoomActionHandler

logger = logging.getLogger(__name__)


def register_socket_handlers(socketio_instance):
    """Register all socket handlers with the SocketIO instance."""
    router = setup_router()

    player_handler = PlayerHandler()
    room_handler = RoomHandler()
    action_handler = RoomActionHandler()

    # Connection lifecycle events bypass the router
    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)

    router.register_route('create_player', player_handler.handle_create_player)
    router.register_route('get_current_player', player_handler.handle_get_current_player)

    router.register_route('get_room', room_handler.handle_get_room)
    router.register_route('watch_room', room_handler.handle_watch_room)
    router.register_route('unwatch_room', room_handler.handle_unwatch_room)
    router.register_route('create_room', room_handler.handle_create_room)
    router.register_route('remove_room', room_handler.handle_remove_room)
    router.register_route('join_room', room_handler.handle_join_room)
    router.register_route('add_participant', room_handler.handle_add_participant)

    router.register_route('update_lock', action_handler.handle_update_lock)
    router.register_route('update_reveal', action_handler.handle_update_reveal)
    router.register_route('update_story_url', action_handler.handle_update_story_url)
    router.register_route('cast_vote', action_handler.handle_cast_vote)

    router.register_with_socketio(socketio_instance)

    logger.info(f"Registered {len(router.get_registered_events())} socket event handlers")
    return router


def handle_connect(auth=None):
    """
    Bind the connection to the client's session id, generating one if absent.

    Rejects connections with a malformed session id, and in production those
    from an Origin outside the configured allowlist.
    """
    app_config = get_config()
    container = get_container()
    session_service = container.get('SessionService')
    validation_service = container.get('ValidationService')
    error_response_factory = container.get('ErrorResponseFactory')

    origin = request.headers.get('Origin')
    if app_config.is_production and app_config.cors_allowed_origins:
        if origin and origin not in app_config.cors_allowed_origins:
            logger.warning(f'Rejecting connection from disallowed Origin: {origin}')
            return False

    raw_session_id = auth.get('session_id') if isinstance(auth, dict) else None
    if raw_session_id is None:
        session_id = uuid.uuid4().hex
    else:
        try:
            session_id = validation_service.validate_session_id(raw_session_id)
        except ValidationError as e:
            logger.warning(f'Rejecting connection {request.sid}: {e.message}')  # type: ignore[attr-defined]
            return False

    session_service.bind_session(request.sid, session_id)  # type: ignore[attr-defined]
    player = session_service.get_player_for_session(session_id)

    logger.info(f'Client connected: {request.sid} (session {session_id}) from Origin: {origin}')  # type: ignore[attr-defined]
    emit('connected', error_response_factory.create_success_response({
        'session_id': session_id,
        'player': player.to_dict() if player else None
    }))


def handle_disconnect(reason=None):
    """Forget the connection's session binding and rate-limit state."""
    container = get_container()
    session_service = container.get('SessionService')

    session_info = session_service.remove_session(request.sid)  # type: ignore[attr-defined]
    event_queue_manager = get_event_queue_manager()
    if event_queue_manager is not None:
        event_queue_manager.forget_client(request.sid)  # type: ignore[attr-defined]

    watched = sorted(session_info['watching']) if session_info else []
    logger.info(f'Client disconnected: {request.sid} (reason={reason}, was watching={watched})')  # type: ignore[attr-defined]

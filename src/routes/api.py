"""
REST API endpoints for PokerPlan.
"""

import logging
from flask import Blueprint, jsonify

from src.core.errors import ErrorCode, ValidationError

logger = logging.getLogger(__name__)


def create_api_blueprint(container):
    """Create the API Blueprint. Services are resolved from the container per request.

    Args:
        container: ServiceContainer providing RoomManager, RoomStatePresenter,
            ValidationService and ErrorResponseFactory
    """
    api = Blueprint('api', __name__)

    @api.route('/api/health')
    def health():
        """Liveness check with the number of rooms in memory."""
        room_manager = container.get('RoomManager')
        return jsonify({'status': 'ok', 'rooms': room_manager.count_rooms()})

    @api.route('/api/rooms/<room_id>')
    def get_room(room_id):
        """Read-only room state. Votes stay hidden until revealed."""
        error_response_factory = container.get('ErrorResponseFactory')
        try:
            room_id = container.get('ValidationService').validate_room_id(room_id)
        except ValidationError as e:
            return jsonify(error_response_factory.create_error_response(e.code, e.message, e.details)), 400

        room = container.get('RoomManager').get_room(room_id)
        if room is None:
            logger.info(f'REST lookup for missing room {room_id}')
            return jsonify(error_response_factory.create_error_response(
                ErrorCode.ROOM_NOT_FOUND,
                f'Room {room_id} not found',
                {'room_id': room_id}
            )), 404

        room_state = container.get('RoomStatePresenter').create_room_state(room)
        return jsonify(error_response_factory.create_success_response({'room': room_state}))

    return api

"""
API Routes Unit Tests

Tests the REST blueprint against the real container services.
"""

import json

import pytest
from flask import Flask

from src.routes.api import create_api_blueprint


@pytest.fixture
def client(container):
    app = Flask(__name__)
    app.register_blueprint(create_api_blueprint(container))
    return app.test_client()


class TestHealthRoute:

    def test_health_counts_rooms(self, client, room_manager, player):
        assert client.get('/api/health').get_json() == {'status': 'ok', 'rooms': 0}

        room_manager.create_room('Sprint 12', 'fibonacci', session_id='session-ada')

        assert client.get('/api/health').get_json() == {'status': 'ok', 'rooms': 1}


class TestRoomRoute:

    def test_returns_presented_room(self, client, room_manager, player):
        room_id = room_manager.create_room('Sprint 12', 'fibonacci', session_id='session-ada')
        room_manager.cast_vote(room_id, 'ada', '5')

        response = client.get(f'/api/rooms/{room_id}')

        assert response.status_code == 200
        body = response.get_json()
        assert body['success'] is True
        room = body['data']['room']
        assert room['room_id'] == 'sprint-12'
        assert room['pretty_name'] == 'Sprint 12'
        assert room['participants'][0]['player_id'] == 'ada'
        assert room['participants'][0]['has_voted'] is True
        assert room['participants'][0]['vote'] is None

    def test_revealed_room_with_non_numeric_cards_is_strict_json(self, client, room_manager, player, other_player):
        room_id = room_manager.create_room('Sprint 12', 'fibonacci', session_id='session-ada')
        room_manager.add_participant(room_id, 'bob')
        room_manager.cast_vote(room_id, 'ada', 'nan')
        room_manager.cast_vote(room_id, 'bob', '5')
        room_manager.update_reveal(room_id, True)

        def reject_constant(name):
            raise ValueError(f'non-standard JSON constant {name}')

        body = json.loads(client.get(f'/api/rooms/{room_id}').get_data(as_text=True), parse_constant=reject_constant)

        assert body['data']['room']['vote_summary']['average'] == 5.0

    def test_missing_room_is_404(self, client):
        response = client.get('/api/rooms/ghost')

        assert response.status_code == 404
        assert response.get_json()['error']['code'] == 'ROOM_NOT_FOUND'

    def test_malformed_room_id_is_400(self, client):
        response = client.get('/api/rooms/Bad_Id')

        assert response.status_code == 400
        assert response.get_json()['error']['code'] == 'INVALID_ROOM_ID'

    def test_blueprint_name(self, container):
        assert create_api_blueprint(container).name == 'api'

"""
Broadcast Service Unit Tests
"""

from unittest.mock import Mock

from src.services.broadcast_service import BroadcastService
from src.services.player_directory_service import PlayerDirectoryService
from src.services.room_state_presenter import RoomStatePresenter
from src.services.session_service import SessionService
from src.room_manager import RoomManager
from tests.helpers.socket_mocks import create_mock_socketio


class TestBroadcastService:

    def setup_method(self):
        self.socketio = create_mock_socketio()
        self.directory = PlayerDirectoryService()
        self.room_manager = RoomManager(self.directory)
        self.sessions = SessionService(self.directory)
        self.service = BroadcastService(self.socketio, self.room_manager,
                                        RoomStatePresenter(self.directory), self.sessions)

        self.directory.create_player('s-ada', 'Ada', 'ada')
        self.directory.create_player('s-bob', 'Bob', 'bob')
        self.room_id = self.room_manager.create_room('Sprint 12', 'fibonacci', session_id='s-ada')
        self.room_manager.add_participant(self.room_id, 'bob')
        self.room_manager.cast_vote(self.room_id, 'ada', '3')
        self.room_manager.cast_vote(self.room_id, 'bob', '8')

    def test_emit_to_room(self):
        self.service.emit_to_room('evt', {'a': 1}, 'room')
        self.socketio.emit.assert_called_once_with('evt', {'a': 1}, room='room', skip_sid=None)

    def test_emit_errors_are_logged_not_raised(self):
        self.socketio.emit.side_effect = RuntimeError('transport down')

        self.service.emit_to_player('evt', {}, 'sid-1')

    def test_room_update_is_personalized_per_watcher(self):
        self.sessions.bind_session('sid-ada', 's-ada')
        self.sessions.bind_session('sid-bob', 's-bob')
        self.sessions.bind_session('sid-guest', 's-guest')
        for sid in ('sid-ada', 'sid-bob', 'sid-guest'):
            self.sessions.watch_room(sid, self.room_id)

        assert self.service.broadcast_room_update(self.room_id) == 3

        sent = {call.kwargs['room']: call.args[1] for call in self.socketio.emit.call_args_list}
        assert all(call.args[0] == 'room_updated' for call in self.socketio.emit.call_args_list)

        def votes(state):
            return [p['vote'] for p in state['participants']]

        assert votes(sent['sid-ada']) == ['3', None]
        assert votes(sent['sid-bob']) == [None, '8']
        assert votes(sent['sid-guest']) == [None, None]

    def test_room_update_for_missing_room(self):
        assert self.service.broadcast_room_update('ghost') == 0
        self.socketio.emit.assert_not_called()

    def test_room_removed_notifies_and_closes(self):
        self.service.broadcast_room_removed(self.room_id, skip_sid='sid-admin')

        self.socketio.emit.assert_called_once_with(
            'room_closed', {'room_id': self.room_id, 'removed': True},
            room=self.room_id, skip_sid='sid-admin'
        )
        self.socketio.close_room.assert_called_once_with(self.room_id)

    def test_close_room_failure_is_logged(self):
        self.socketio.close_room = Mock(side_effect=RuntimeError('nope'))

        self.service.broadcast_room_removed(self.room_id)

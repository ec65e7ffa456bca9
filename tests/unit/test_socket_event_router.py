"""
Socket Event Router Unit Tests
"""

from unittest.mock import Mock, patch

import pytest

from src.handlers import socket_event_router
from src.handlers.socket_event_router import EventRouteNotFoundError, SocketEventRouter, setup_router


@pytest.fixture
def request_context():
    with patch.object(socket_event_router, 'request', Mock(sid='sid-1')):
        yield


class TestSocketEventRouter:

    def setup_method(self):
        self.router = SocketEventRouter()

    def test_register_and_handle(self, request_context):
        handler = Mock(return_value='done', __name__='handler')
        self.router.register_route('get_room', handler)

        assert self.router.handle_event('get_room', {'room_id': 'x'}) == 'done'
        handler.assert_called_once_with({'room_id': 'x'})
        assert self.router.has_route('get_room')
        assert self.router.get_registered_events() == ['get_room']

    def test_duplicate_route_rejected(self):
        self.router.register_route('get_room', Mock(__name__='a'))
        with pytest.raises(ValueError):
            self.router.register_route('get_room', Mock(__name__='b'))

    def test_unknown_event(self, request_context):
        with pytest.raises(EventRouteNotFoundError):
            self.router.handle_event('nope')

    def test_middleware_can_replace_data(self, request_context):
        handler = Mock(__name__='handler')
        self.router.register_route('cast_vote', handler)
        self.router.add_middleware(lambda event, data: {**data, 'seen': event})

        self.router.handle_event('cast_vote', {'vote': '5'})

        handler.assert_called_once_with({'vote': '5', 'seen': 'cast_vote'})

    def test_hooks_run_around_handler_and_on_error(self, request_context):
        calls = []
        self.router.add_before_request(lambda event, data: calls.append(('before', event)))
        self.router.add_after_request(lambda event, data, result, error=None: calls.append(('after', result, error)))

        self.router.register_route('ok', Mock(return_value=1, __name__='ok'))
        failure = RuntimeError('boom')
        self.router.register_route('fail', Mock(side_effect=failure, __name__='fail'))

        self.router.handle_event('ok')
        with pytest.raises(RuntimeError):
            self.router.handle_event('fail')

        assert calls == [('before', 'ok'), ('after', 1, None), ('before', 'fail'), ('after', None, failure)]

    def test_register_with_socketio(self, request_context):
        handler = Mock(return_value='x', __name__='handler')
        self.router.register_route('get_room', handler)
        socketio = Mock()

        self.router.register_with_socketio(socketio)

        event_name, socketio_handler = socketio.on_event.call_args[0]
        assert event_name == 'get_room'
        assert socketio_handler({'room_id': 'a'}) == 'x'


def test_setup_router_installs_defaults(request_context):
    router = setup_router()
    router.register_route('echo', lambda data: data)

    assert router.handle_event('echo', {'a': 1}) == {'a': 1}
    assert socket_event_router.get_router() is router

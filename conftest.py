"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import pytest
import os

# Ensure testing environment (threading async mode, rate limiting off)
os.environ['TESTING'] = '1'


@pytest.fixture(scope="function", autouse=True)
def reset_global_container():
    """Reset configuration, room settings, rate limiting and the global container before each test."""
    from container import configure_container
    from config_factory import ConfigurationFactory
    from src.config.room_settings import get_room_settings, reset_room_settings
    from src.services.rate_limit_service import EventQueueManager, set_event_queue_manager
    from app import socketio as app_socketio

    config_factory = ConfigurationFactory()
    config_factory.reset()
    app_config = config_factory.load_from_environment()

    reset_room_settings()
    get_room_settings(app_config)

    configure_container(socketio=app_socketio, config=config_factory.to_dict())
    set_event_queue_manager(EventQueueManager(app_config))

    yield

    reset_room_settings()


@pytest.fixture(scope="session")
def app():
    """Flask app for testing."""
    from app import app as flask_app
    return flask_app


@pytest.fixture(scope="session")
def socketio():
    """SocketIO instance for testing."""
    from app import socketio as socketio_instance
    return socketio_instance


@pytest.fixture(scope="function")
def container():
    """The global service container, freshly configured for this test."""
    from container import get_container
    return get_container()


@pytest.fixture(scope="function")
def room_manager(container):
    """Provide RoomManager service through dependency injection."""
    return container.get('RoomManager')


@pytest.fixture(scope="function")
def player_directory(container):
    """Provide PlayerDirectoryService through dependency injection."""
    return container.get('PlayerDirectoryService')


@pytest.fixture(scope="function")
def session_service(container):
    """Provide SessionService through dependency injection."""
    return container.get('SessionService')


@pytest.fixture(scope="function")
def broadcast_service(container):
    """Provide BroadcastService through dependency injection."""
    return container.get('BroadcastService')


@pytest.fixture(scope="function")
def validation_service(container):
    """Provide ValidationService through dependency injection."""
    return container.get('ValidationService')


@pytest.fixture(scope="function")
def error_response_factory(container):
    """Provide ErrorResponseFactory through dependency injection."""
    return container.get('ErrorResponseFactory')


@pytest.fixture(scope="function")
def room_state_presenter(container):
    return container.get('RoomStatePresenter')


@pytest.fixture(scope="function")
def player(player_directory):
    """A player bound to session 'session-ada'."""
    return player_directory.create_player('session-ada', 'Ada', 'ada')


@pytest.fixture(scope="function")
def other_player(player_directory):
    """A second player bound to session 'session-bob'."""
    return player_directory.create_player('session-bob', 'Bob', 'bob')

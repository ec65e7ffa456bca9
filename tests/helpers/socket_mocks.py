"""
Common SocketIO mock patterns for testing.
Provides standardized mock objects and utilities for testing Socket.IO functionality.
"""

from unittest.mock import Mock


def create_mock_socketio():
    """Create a standardized mock SocketIO object for testing.

    Returns:
        Mock: A configured mock SocketIO object with common methods
    """
    mock_socketio = Mock()
    mock_socketio.emit = Mock()
    mock_socketio.close_room = Mock()
    return mock_socketio


def create_handler_container(**services):
    """Create a mock container whose get() returns the given services by name.

    Unknown service names resolve to a fresh Mock, like an unconfigured dependency.
    """
    container = Mock()
    container.get.side_effect = lambda name: services.get(name, Mock())
    return container


def emitted_events(mock_emit):
    """List of (event, payload) pairs from a patched emit."""
    return [(call[0][0], call[0][1] if len(call[0]) > 1 else None) for call in mock_emit.call_args_list]


def find_received(received, event_name):
    """Filter SocketIOTestClient.get_received() output by event name."""
    return [message['args'][0] for message in received if message['name'] == event_name]

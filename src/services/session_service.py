"""
Session Service - Resolves Socket.IO connections to sessions and players.

This service handles:
- Socket ID to session ID binding
- Session ID to player resolution (via the player directory)
- Rooms each connection is watching for live updates
- Connection cleanup
"""

import logging
from typing import Any, Dict, List, Optional, Set

from src.core.models import Player

logger = logging.getLogger(__name__)


class SessionService:
    """Manages socket sessions and resolves the acting player."""

    def __init__(self, player_directory):
        """Initialize the session service.

        Args:
            player_directory: PlayerDirectoryService used to resolve players
        """
        self.player_directory = player_directory
        # socket_id -> {'session_id': str, 'watching': set of room ids}
        self._socket_sessions: Dict[str, Dict[str, Any]] = {}
        logger.info("SessionService initialized")

    def bind_session(self, socket_id: str, session_id: str) -> None:
        """Bind a socket connection to a session identifier.

        Args:
            socket_id: Socket.IO connection ID
            session_id: Opaque session identifier supplied by the client
        """
        previous = self._socket_sessions.get(socket_id)
        watching = previous['watching'] if previous else set()
        self._socket_sessions[socket_id] = {'session_id': session_id, 'watching': watching}
        logger.debug(f"Bound socket {socket_id} to session {session_id}")

    def get_session_id(self, socket_id: str) -> Optional[str]:
        session_info = self._socket_sessions.get(socket_id)
        return session_info['session_id'] if session_info else None

    def has_session(self, socket_id: str) -> bool:
        return socket_id in self._socket_sessions

    def get_player_for_session(self, session_id: Optional[str]) -> Optional[Player]:
        """Resolve the player bound to a session, if any."""
        if not session_id:
            return None
        return self.player_directory.get_by_session_id(session_id)

    def get_current_player(self, socket_id: str) -> Optional[Player]:
        """Resolve the player for a socket connection, if any."""
        return self.get_player_for_session(self.get_session_id(socket_id))

    def watch_room(self, socket_id: str, room_id: str) -> bool:
        """Record that a connection receives live updates for a room.

        Returns:
            False if the socket has no session
        """
        session_info = self._socket_sessions.get(socket_id)
        if not session_info:
            return False
        session_info['watching'].add(room_id)
        return True

    def unwatch_room(self, socket_id: str, room_id: str) -> bool:
        session_info = self._socket_sessions.get(socket_id)
        if not session_info or room_id not in session_info['watching']:
            return False
        session_info['watching'].discard(room_id)
        return True

    def get_watched_rooms(self, socket_id: str) -> Set[str]:
        session_info = self._socket_sessions.get(socket_id)
        return set(session_info['watching']) if session_info else set()

    def get_watchers(self, room_id: str) -> List[str]:
        """Socket ids currently watching a room."""
        return [
            socket_id for socket_id, session_info in self._socket_sessions.items()
            if room_id in session_info['watching']
        ]

    def drop_room(self, room_id: str) -> int:
        """Stop every connection from watching a room (after it is removed).

        Returns:
            Number of connections that were watching
        """
        watchers = self.get_watchers(room_id)
        for socket_id in watchers:
            self._socket_sessions[socket_id]['watching'].discard(room_id)
        return len(watchers)

    def remove_session(self, socket_id: str) -> Optional[Dict[str, Any]]:
        """Forget a socket connection.

        Returns:
            The removed session info or None if not found
        """
        session_info = self._socket_sessions.pop(socket_id, None)
        if session_info:
            logger.debug(f"Removed socket {socket_id} (session {session_info['session_id']})")
        return session_info

    def get_sessions_count(self) -> int:
        return len(self._socket_sessions)

    def cleanup_stale_sessions(self, active_socket_ids: set) -> int:
        """Clean up sessions for disconnected sockets.

        Args:
            active_socket_ids: Set of currently connected socket IDs

        Returns:
            Number of sessions cleaned up
        """
        stale_sockets = [socket_id for socket_id in self._socket_sessions if socket_id not in active_socket_ids]
        for socket_id in stale_sockets:
            self.remove_session(socket_id)

        if stale_sockets:
            logger.info(f"Cleaned up {len(stale_sockets)} stale sessions")
        return len(stale_sockets)

    def get_debug_info(self) -> Dict[str, Any]:
        """Get debug information about active sessions."""
        watch_counts: Dict[str, int] = {}
        for session_info in self._socket_sessions.values():
            for room_id in session_info['watching']:
                watch_counts[room_id] = watch_counts.get(room_id, 0) + 1

        return {
            'total_sessions': len(self._socket_sessions),
            'watchers_by_room': watch_counts,
            'watched_rooms': len(watch_counts)
        }

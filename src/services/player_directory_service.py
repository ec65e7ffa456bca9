"""
Player Directory Service for PokerPlan

Holds player records and resolves them by external player_id, by internal
doc id, or by the session they are bound to.
"""

import copy
import logging
import threading
import uuid
from typing import Dict, Iterable, Optional

from src.core.models import Player

logger = logging.getLogger(__name__)


class PlayerDirectoryService:
    """Registry of players with player_id and session_id indexes."""

    def __init__(self):
        self._players: Dict[str, Player] = {}
        self._by_player_id: Dict[str, str] = {}
        self._by_session_id: Dict[str, str] = {}
        self._lock = threading.RLock()

    def create_player(self, session_id: str, name: str, player_id: Optional[str] = None) -> Player:
        """
        Create the player for a session, or return the session's existing one.

        A session maps to at most one player. Calling this again for the same
        session renames the existing player rather than creating a second.

        Args:
            session_id: Opaque session identifier
            name: Display name
            player_id: Optional external id; generated when omitted

        Returns:
            The session's Player

        Raises:
            ValueError: If player_id already belongs to another session
        """
        with self._lock:
            existing_doc_id = self._by_session_id.get(session_id)
            if existing_doc_id:
                player = self._players[existing_doc_id]
                if player_id and player_id != player.player_id:
                    raise ValueError(f"Session {session_id} is already bound to player {player.player_id}")
                if player.name != name:
                    logger.info(f"Renamed player {player.player_id}: {player.name} -> {name}")
                    player.name = name
                return copy.copy(player)

            if player_id is None:
                player_id = uuid.uuid4().hex
            elif player_id in self._by_player_id:
                raise ValueError(f"Player id {player_id} is already taken")

            player = Player(player_id=player_id, name=name, session_id=session_id)
            self._players[player.doc_id] = player
            self._by_player_id[player_id] = player.doc_id
            self._by_session_id[session_id] = player.doc_id
            logger.info(f"Created player {name} ({player_id})")
            return copy.copy(player)

    def get_by_player_id(self, player_id: str) -> Optional[Player]:
        with self._lock:
            doc_id = self._by_player_id.get(player_id)
            return copy.copy(self._players[doc_id]) if doc_id else None

    def get_by_session_id(self, session_id: str) -> Optional[Player]:
        with self._lock:
            doc_id = self._by_session_id.get(session_id)
            return copy.copy(self._players[doc_id]) if doc_id else None

    def get_by_doc_id(self, doc_id: str) -> Optional[Player]:
        with self._lock:
            player = self._players.get(doc_id)
            return copy.copy(player) if player else None

    def get_many_by_doc_ids(self, doc_ids: Iterable[str]) -> Dict[str, Player]:
        """Resolve several doc ids at once; unknown ids are left out."""
        with self._lock:
            return {
                doc_id: copy.copy(self._players[doc_id])
                for doc_id in doc_ids
                if doc_id in self._players
            }

    def update_name(self, player_id: str, name: str) -> bool:
        with self._lock:
            doc_id = self._by_player_id.get(player_id)
            if not doc_id:
                return False
            self._players[doc_id].name = name
            return True

    def count(self) -> int:
        return len(self._players)

    def clear(self) -> None:
        with self._lock:
            self._players.clear()
            self._by_player_id.clear()
            self._by_session_id.clear()

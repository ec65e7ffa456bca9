"""
Room Repository Service for PokerPlan

In-process document store for rooms, indexed by room_id.
Records handed out are deep copies; writes go through save/insert/delete.
"""

import copy
import logging
import threading
from typing import Dict, List, Optional

from src.core.models import Room

logger = logging.getLogger(__name__)


class RoomRepositoryService:
    """Stores room records and enforces room_id uniqueness on insert."""

    def __init__(self):
        self._rooms: Dict[str, Room] = {}
        self._rooms_lock = threading.RLock()

    def get(self, room_id: str) -> Optional[Room]:
        """
        Look up a room by exact room_id.

        Args:
            room_id: ID of the room

        Returns:
            A copy of the room, or None if no room has that id
        """
        with self._rooms_lock:
            room = self._rooms.get(room_id)
            return copy.deepcopy(room) if room else None

    def exists(self, room_id: str) -> bool:
        return room_id in self._rooms

    def insert_if_absent(self, room: Room) -> bool:
        """
        Insert a new room unless its room_id is already taken.

        The existence check and the insert happen under one lock, so two
        concurrent inserts of the same id cannot both succeed.

        Returns:
            True if inserted, False if the id was taken
        """
        with self._rooms_lock:
            if room.room_id in self._rooms:
                return False
            self._rooms[room.room_id] = copy.deepcopy(room)
            logger.debug(f"Inserted room {room.room_id}")
            return True

    def save(self, room: Room) -> bool:
        """
        Replace a stored room with an updated copy.

        Returns:
            True if saved, False if the room no longer exists
        """
        with self._rooms_lock:
            stored = self._rooms.get(room.room_id)
            if stored is None or stored.doc_id != room.doc_id:
                return False
            room.touch()
            self._rooms[room.room_id] = copy.deepcopy(room)
            return True

    def delete(self, room_id: str) -> bool:
        with self._rooms_lock:
            if room_id in self._rooms:
                del self._rooms[room_id]
                logger.debug(f"Deleted room {room_id}")
                return True
            return False

    def get_all_room_ids(self) -> List[str]:
        with self._rooms_lock:
            return list(self._rooms.keys())

    def count(self) -> int:
        return len(self._rooms)

    def clear(self) -> None:
        """Drop every room (useful for testing)."""
        with self._rooms_lock:
            self._rooms.clear()

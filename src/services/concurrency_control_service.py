"""
Concurrency Control Service for PokerPlan

Hands out per-room locks so that read-check-write sequences on a single room
(membership checks, vote updates, field patches) run as one atomic unit.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict

logger = logging.getLogger(__name__)


class ConcurrencyControlService:
    """Manages per-room locking for thread-safe room mutations."""

    def __init__(self):
        # Per-room locks for fine-grained control
        self._room_locks: Dict[str, threading.RLock] = {}
        # Lock for managing room locks themselves
        self._locks_lock = threading.Lock()

    def get_room_lock(self, room_id: str) -> threading.RLock:
        """Get or create a lock for a specific room."""
        with self._locks_lock:
            if room_id not in self._room_locks:
                self._room_locks[room_id] = threading.RLock()
            return self._room_locks[room_id]

    def cleanup_room_lock(self, room_id: str):
        """
        Clean up lock for a deleted room.

        Call this while holding the room's lock (inside room_operation), so
        threads queued on the old lock notice it was retired.
        """
        with self._locks_lock:
            if room_id in self._room_locks:
                del self._room_locks[room_id]

    def active_lock_count(self) -> int:
        with self._locks_lock:
            return len(self._room_locks)

    def _is_current_lock(self, room_id: str, room_lock: threading.RLock) -> bool:
        with self._locks_lock:
            return self._room_locks.get(room_id) is room_lock

    @contextmanager
    def room_operation(self, room_id: str):
        """
        Context manager for thread-safe room operations.

        A lock retired by cleanup_room_lock while this thread waited on it no
        longer guards the room id, so the thread retries with the current lock.
        """
        while True:
            room_lock = self.get_room_lock(room_id)
            with room_lock:
                if self._is_current_lock(room_id, room_lock):
                    yield
                    return
            logger.debug(f"Lock for room {room_id} was retired while waiting, retrying")

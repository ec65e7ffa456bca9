"""
Core error definitions for PokerPlan

Provides error codes and exceptions that don't depend on other services.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Request Data Errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_DATA = "MISSING_DATA"
    MISSING_ROOM_ID = "MISSING_ROOM_ID"
    INVALID_ROOM_ID = "INVALID_ROOM_ID"
    MISSING_ROOM_NAME = "MISSING_ROOM_NAME"
    INVALID_ROOM_NAME = "INVALID_ROOM_NAME"
    ROOM_NAME_TOO_LONG = "ROOM_NAME_TOO_LONG"
    MISSING_PLAYER_NAME = "MISSING_PLAYER_NAME"
    PLAYER_NAME_TOO_LONG = "PLAYER_NAME_TOO_LONG"
    INVALID_PLAYER_ID = "INVALID_PLAYER_ID"
    INVALID_VOTE_SYSTEM = "INVALID_VOTE_SYSTEM"
    INVALID_VOTE = "INVALID_VOTE"
    INVALID_STORY_URL = "INVALID_STORY_URL"
    INVALID_FLAG = "INVALID_FLAG"

    # Session and Identity Errors
    NO_SESSION = "NO_SESSION"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    PLAYER_ID_TAKEN = "PLAYER_ID_TAKEN"

    # Room Errors
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_LOCKED = "ROOM_LOCKED"
    ROOM_FULL = "ROOM_FULL"
    ROOM_ID_CONFLICT = "ROOM_ID_CONFLICT"
    NOT_A_PARTICIPANT = "NOT_A_PARTICIPANT"
    NOT_ALLOWED_TO_VOTE = "NOT_ALLOWED_TO_VOTE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    VOTE_LOCKED = "VOTE_LOCKED"

    # System Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RATE_LIMITED = "RATE_LIMITED"


class ValidationError(Exception):
    """Custom exception for validation errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class PlayerNotFoundError(LookupError):
    """Raised when no player can be resolved for a session that must have one."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Creator player not found: {session_id}")


class RoomIdConflictError(Exception):
    """Raised when every candidate room identifier is already taken."""

    def __init__(self, base_room_id: str, attempts: int):
        self.base_room_id = base_room_id
        self.attempts = attempts
        super().__init__(f"Could not allocate a room id for '{base_room_id}' after {attempts} attempts")

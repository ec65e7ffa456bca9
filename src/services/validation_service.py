"""
Validation Service for PokerPlan

Provides input validation and sanitization functionality separated from error response handling.
"""

import logging
import re
from typing import Any, Dict, Optional

from src.config.room_settings import get_room_settings
from src.core.errors import ErrorCode, ValidationError
from src.utils.room_id_generator import format_string_to_room_id

logger = logging.getLogger(__name__)


class ValidationService:
    """Service responsible for input validation and sanitization."""

    # Validation constants
    MAX_PLAYER_NAME_LENGTH = 30
    MAX_PLAYER_ID_LENGTH = 64
    MAX_SESSION_ID_LENGTH = 128
    MAX_VOTE_LENGTH = 10
    MAX_VOTE_SYSTEM_LENGTH = 32
    ROOM_ID_SUFFIX_ALLOWANCE = 10

    # Room IDs are the slugs produced by format_string_to_room_id, optionally suffixed
    ROOM_ID_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
    PLAYER_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')
    VOTE_SYSTEM_PATTERN = re.compile(r'^[a-z0-9_-]+$')
    CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')

    def __init__(self):
        self.room_settings = get_room_settings()

    @property
    def max_room_name_length(self) -> int:
        return self.room_settings.max_room_name_length

    def _clean_text(self, text: str) -> str:
        """Strip surrounding whitespace and control characters."""
        return self.CONTROL_CHARS.sub('', text).strip()

    def validate_socket_data(self, data: Any, required_fields: Optional[list] = None) -> Dict:
        """
        Validate Socket.IO event data.

        Args:
            data: Raw data from Socket.IO event
            required_fields: List of required field names

        Returns:
            Validated data dictionary

        Raises:
            ValidationError: If data is invalid
        """
        if not isinstance(data, dict):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                "Invalid data format - expected dictionary"
            )

        if required_fields:
            missing_fields = [field for field in required_fields if field not in data]
            if missing_fields:
                # For specific common fields, provide more specific error codes
                if len(missing_fields) == 1:
                    field = missing_fields[0]
                    if field == 'room_id':
                        raise ValidationError(
                            ErrorCode.MISSING_ROOM_ID,
                            "Room ID is required"
                        )
                    elif field == 'room_name':
                        raise ValidationError(
                            ErrorCode.MISSING_ROOM_NAME,
                            "Room name is required"
                        )
                    elif field == 'name':
                        raise ValidationError(
                            ErrorCode.MISSING_PLAYER_NAME,
                            "Player name is required"
                        )

                raise ValidationError(
                    ErrorCode.MISSING_DATA,
                    f"Missing required fields: {', '.join(missing_fields)}",
                    {"missing_fields": missing_fields, "required_fields": required_fields}
                )

        return data

    def validate_room_id(self, room_id: Any) -> str:
        """
        Validate a room ID as produced by room creation.

        Args:
            room_id: Raw room ID

        Returns:
            Normalized (lower-cased, stripped) room ID

        Raises:
            ValidationError: If room ID is invalid
        """
        if not room_id or not isinstance(room_id, str):
            raise ValidationError(
                ErrorCode.MISSING_ROOM_ID,
                "Room ID is required"
            )

        room_id = room_id.strip().lower()

        if not room_id:
            raise ValidationError(
                ErrorCode.MISSING_ROOM_ID,
                "Room ID cannot be empty"
            )

        max_length = self.max_room_name_length + self.ROOM_ID_SUFFIX_ALLOWANCE
        if len(room_id) > max_length:
            raise ValidationError(
                ErrorCode.INVALID_ROOM_ID,
                f"Room ID must be {max_length} characters or less",
                {"max_length": max_length, "actual_length": len(room_id)}
            )

        if not self.ROOM_ID_PATTERN.match(room_id):
            raise ValidationError(
                ErrorCode.INVALID_ROOM_ID,
                "Room ID can only contain lowercase letters, numbers, and single hyphens"
            )

        return room_id

    def validate_room_name(self, room_name: Any) -> str:
        """
        Validate a room display name.

        The name is kept exactly as given, since it becomes the room's display
        name. It must leave something after slug normalization, since the room
        id is derived from it.

        Raises:
            ValidationError: If room name is invalid
        """
        if not room_name or not isinstance(room_name, str):
            raise ValidationError(
                ErrorCode.MISSING_ROOM_NAME,
                "Room name is required"
            )

        if not room_name.strip():
            raise ValidationError(
                ErrorCode.MISSING_ROOM_NAME,
                "Room name cannot be empty"
            )

        if self.CONTROL_CHARS.search(room_name):
            raise ValidationError(
                ErrorCode.INVALID_ROOM_NAME,
                "Room name cannot contain control characters"
            )

        if len(room_name) > self.max_room_name_length:
            raise ValidationError(
                ErrorCode.ROOM_NAME_TOO_LONG,
                f"Room name must be {self.max_room_name_length} characters or less",
                {"max_length": self.max_room_name_length, "actual_length": len(room_name)}
            )

        if not format_string_to_room_id(room_name, self.max_room_name_length):
            raise ValidationError(
                ErrorCode.INVALID_ROOM_NAME,
                "Room name must contain at least one letter or number"
            )

        return room_name

    def validate_player_name(self, player_name: Any) -> str:
        """
        Validate and sanitize player name.

        Raises:
            ValidationError: If player name is invalid
        """
        if not player_name or not isinstance(player_name, str):
            raise ValidationError(
                ErrorCode.MISSING_PLAYER_NAME,
                "Player name is required"
            )

        player_name = self._clean_text(player_name)

        if not player_name:
            raise ValidationError(
                ErrorCode.MISSING_PLAYER_NAME,
                "Player name cannot be empty"
            )

        if len(player_name) > self.MAX_PLAYER_NAME_LENGTH:
            raise ValidationError(
                ErrorCode.PLAYER_NAME_TOO_LONG,
                f"Player name must be {self.MAX_PLAYER_NAME_LENGTH} characters or less",
                {"max_length": self.MAX_PLAYER_NAME_LENGTH, "actual_length": len(player_name)}
            )

        return player_name

    def validate_player_id(self, player_id: Any) -> str:
        if not player_id or not isinstance(player_id, str):
            raise ValidationError(
                ErrorCode.INVALID_PLAYER_ID,
                "Player ID is required"
            )

        player_id = player_id.strip()

        if len(player_id) > self.MAX_PLAYER_ID_LENGTH or not self.PLAYER_ID_PATTERN.match(player_id):
            raise ValidationError(
                ErrorCode.INVALID_PLAYER_ID,
                "Player ID can only contain letters, numbers, hyphens, and underscores",
                {"max_length": self.MAX_PLAYER_ID_LENGTH}
            )

        return player_id

    def validate_session_id(self, session_id: Any) -> str:
        if not session_id or not isinstance(session_id, str):
            raise ValidationError(
                ErrorCode.NO_SESSION,
                "Session ID is required"
            )

        session_id = session_id.strip()
        if not session_id or len(session_id) > self.MAX_SESSION_ID_LENGTH:
            raise ValidationError(
                ErrorCode.NO_SESSION,
                f"Session ID must be between 1 and {self.MAX_SESSION_ID_LENGTH} characters"
            )

        return session_id

    def validate_vote_system(self, vote_system: Any) -> str:
        """
        Validate a vote system identifier, falling back to the configured default.

        Raises:
            ValidationError: If the identifier is malformed
        """
        if vote_system is None or vote_system == '':
            return self.room_settings.default_vote_system

        if not isinstance(vote_system, str):
            raise ValidationError(
                ErrorCode.INVALID_VOTE_SYSTEM,
                "Vote system must be a string"
            )

        vote_system = vote_system.strip().lower()
        if len(vote_system) > self.MAX_VOTE_SYSTEM_LENGTH or not self.VOTE_SYSTEM_PATTERN.match(vote_system):
            raise ValidationError(
                ErrorCode.INVALID_VOTE_SYSTEM,
                "Vote system can only contain lowercase letters, numbers, hyphens, and underscores",
                {"max_length": self.MAX_VOTE_SYSTEM_LENGTH}
            )

        return vote_system

    def validate_vote(self, vote: Any) -> str:
        """
        Validate a card value. An empty string withdraws the vote.

        Raises:
            ValidationError: If the vote is not a short string
        """
        if vote is None:
            return ''

        if not isinstance(vote, str):
            raise ValidationError(
                ErrorCode.INVALID_VOTE,
                "Vote must be a string"
            )

        vote = self._clean_text(vote)
        if len(vote) > self.MAX_VOTE_LENGTH:
            raise ValidationError(
                ErrorCode.INVALID_VOTE,
                f"Vote must be {self.MAX_VOTE_LENGTH} characters or less",
                {"max_length": self.MAX_VOTE_LENGTH, "actual_length": len(vote)}
            )

        return vote

    def validate_story_url(self, story_url: Any) -> str:
        """
        Validate the free-text story reference. Empty clears it.

        Raises:
            ValidationError: If not a string or too long
        """
        if story_url is None:
            return ''

        if not isinstance(story_url, str):
            raise ValidationError(
                ErrorCode.INVALID_STORY_URL,
                "Story URL must be a string"
            )

        story_url = self._clean_text(story_url)
        max_length = self.room_settings.max_story_url_length
        if len(story_url) > max_length:
            raise ValidationError(
                ErrorCode.INVALID_STORY_URL,
                f"Story URL must be {max_length} characters or less",
                {"max_length": max_length, "actual_length": len(story_url)}
            )

        return story_url

    def validate_flag(self, value: Any, field_name: str, default: Optional[bool] = None) -> bool:
        """
        Validate a boolean flag.

        Args:
            value: Raw value
            field_name: Field name for error reporting
            default: Value to use when missing; None makes the flag required

        Raises:
            ValidationError: If the value is not a boolean
        """
        if value is None and default is not None:
            return default

        if not isinstance(value, bool):
            raise ValidationError(
                ErrorCode.INVALID_FLAG,
                f"{field_name} must be true or false",
                {"field": field_name}
            )

        return value

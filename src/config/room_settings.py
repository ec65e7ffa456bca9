"""
Room Settings Configuration Module

Provides centralized access to room-specific configuration values,
with fallback defaults when no application configuration is loaded.
"""

import logging

logger = logging.getLogger(__name__)


class RoomSettings:
    """Centralized room settings management."""

    def __init__(self, app_config=None):
        """
        Initialize room settings.

        Args:
            app_config: Application configuration instance from config_factory
        """
        self._config = app_config
        if app_config is None:
            try:
                from config_factory import get_config
                self._config = get_config()
            except (ImportError, Exception) as e:
                logger.warning(f"Could not load configuration: {e}, using defaults")
                self._config = None

    @property
    def max_participants_per_room(self) -> int:
        """Maximum number of participants admitted to a single room."""
        if self._config is None:
            return 50
        return self._config.max_participants_per_room

    @property
    def max_room_name_length(self) -> int:
        """Maximum length of a room display name, and of the slug derived from it."""
        if self._config is None:
            return 50
        return self._config.max_room_name_length

    @property
    def room_id_suffix_digits(self) -> int:
        """Number of digits in the random suffix appended on slug collisions."""
        if self._config is None:
            return 4
        return self._config.room_id_suffix_digits

    @property
    def room_id_max_attempts(self) -> int:
        """How many identifiers room creation tries before giving up."""
        if self._config is None:
            return 5
        return self._config.room_id_max_attempts

    @property
    def enforce_room_lock(self) -> bool:
        """Whether a locked room rejects new participants."""
        if self._config is None:
            return True
        return self._config.enforce_room_lock

    @property
    def default_vote_system(self) -> str:
        if self._config is None:
            return 'fibonacci'
        return self._config.default_vote_system

    @property
    def max_story_url_length(self) -> int:
        if self._config is None:
            return 2048
        return self._config.max_story_url_length


# Global instance for easy access
_room_settings_instance = None


def get_room_settings(app_config=None) -> RoomSettings:
    """
    Get or create the global room settings instance.

    Args:
        app_config: Optional app config to use

    Returns:
        RoomSettings instance
    """
    global _room_settings_instance

    if _room_settings_instance is None or app_config is not None:
        _room_settings_instance = RoomSettings(app_config)

    return _room_settings_instance


def reset_room_settings():
    """Reset the global room settings instance (mainly for testing)."""
    global _room_settings_instance
    _room_settings_instance = None

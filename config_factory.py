"""
Configuration Factory - Centralized configuration management for PokerPlan
Provides type-safe configuration with validation and environment-specific settings.
"""

import os
import logging
from typing import Any, Dict, List, Optional, Type
from enum import Enum
from dataclasses import dataclass, field


class Environment(Enum):
    """Environment types for configuration"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Configuration-related errors"""
    pass


DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'
SOCKETIO_ASYNC_MODES = ('eventlet', 'threading', 'gevent')


@dataclass
class AppConfig:
    """Application configuration with type safety and validation"""

    # Core Flask settings
    secret_key: str = field(default_factory=lambda: DEFAULT_SECRET_KEY)
    debug: bool = False
    flask_env: str = 'development'

    # Server settings
    host: str = '0.0.0.0'
    port: int = 5000
    socketio_async_mode: str = 'eventlet'
    cors_allowed_origins: List[str] = field(default_factory=list)

    # Room settings
    max_participants_per_room: int = 50
    max_room_name_length: int = 50
    room_id_suffix_digits: int = 4
    room_id_max_attempts: int = 5
    enforce_room_lock: bool = True
    default_vote_system: str = 'fibonacci'
    max_story_url_length: int = 2048

    # Rate Limiting settings
    max_events_per_second: int = 10  # max events per client per second
    max_events_per_minute: int = 100  # max events per client per minute
    global_max_events_per_second: int = 200
    rate_limit_block_seconds: int = 60

    # Gunicorn settings (for production deployment)
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    # Environment
    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        """Validate configuration after initialization"""
        self._validate()

    def _validate(self):
        """Validate configuration values"""
        if self.port < 1 or self.port > 65535:
            raise ConfigError(f"Invalid port number: {self.port}")

        if self.socketio_async_mode not in SOCKETIO_ASYNC_MODES:
            raise ConfigError(f"Invalid socketio_async_mode: {self.socketio_async_mode}")

        if self.max_participants_per_room < 1 or self.max_participants_per_room > 500:
            raise ConfigError(f"Invalid max_participants_per_room: {self.max_participants_per_room}")

        if self.max_room_name_length < 3 or self.max_room_name_length > 200:
            raise ConfigError(f"Invalid max_room_name_length: {self.max_room_name_length}")

        if self.room_id_suffix_digits < 2 or self.room_id_suffix_digits > 8:
            raise ConfigError(f"Invalid room_id_suffix_digits: {self.room_id_suffix_digits}")

        if self.room_id_max_attempts < 1 or self.room_id_max_attempts > 50:
            raise ConfigError(f"Invalid room_id_max_attempts: {self.room_id_max_attempts}")

        if not self.default_vote_system:
            raise ConfigError("default_vote_system cannot be empty")

        if self.max_story_url_length < 1:
            raise ConfigError(f"Invalid max_story_url_length: {self.max_story_url_length}")

        # Rate Limiting validations
        if self.max_events_per_second < 1 or self.max_events_per_second > 1000:
            raise ConfigError(f"Invalid max_events_per_second: {self.max_events_per_second}")

        if self.max_events_per_minute < self.max_events_per_second or self.max_events_per_minute > 10000:
            raise ConfigError(f"Invalid max_events_per_minute: {self.max_events_per_minute}")

        if self.global_max_events_per_second < self.max_events_per_second:
            raise ConfigError(f"Invalid global_max_events_per_second: {self.global_max_events_per_second}")

        if self.environment == Environment.PRODUCTION and self.secret_key == DEFAULT_SECRET_KEY:
            raise ConfigError("Production environment requires a secure SECRET_KEY")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode"""
        return self.environment == Environment.TESTING


class ConfigurationFactory:
    """
    Factory for creating and managing application configuration.

    Features:
    - Environment variable loading with type conversion
    - Configuration validation
    - Environment-specific defaults
    - Singleton pattern for global config access
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        """Singleton pattern implementation"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the configuration factory"""
        if not hasattr(self, '_initialized'):
            self._logger = logging.getLogger(__name__)
            self._env_overrides: Dict[str, Any] = {}
            self._initialized = True

    def load_from_environment(self, env_prefix: str = '') -> AppConfig:
        """
        Load configuration from environment variables.

        Args:
            env_prefix: Optional prefix for environment variables (e.g., 'POKERPLAN_')

        Returns:
            Configured AppConfig instance
        """
        def get_env_var(key: str, default: Any = None, var_type: Type = str) -> Any:
            """Get environment variable with type conversion"""
            env_key = f"{env_prefix}{key}" if env_prefix else key
            value = os.environ.get(env_key)

            if value is None:
                return default

            # Type conversion
            if var_type == bool:
                return value.lower() in ('true', '1', 'yes', 'on')
            elif var_type == int:
                try:
                    return int(value)
                except ValueError:
                    self._logger.warning(f"Invalid integer value for {env_key}: {value}, using default: {default}")
                    return default
            elif var_type == list:
                return [item.strip() for item in value.split(',') if item.strip()]
            else:
                return value

        # Determine environment
        flask_env = get_env_var('FLASK_ENV', 'development')
        if os.environ.get('TESTING') == '1':
            flask_env = 'testing'

        if flask_env == 'development':
            environment = Environment.DEVELOPMENT
            debug = True
        elif flask_env == 'testing':
            environment = Environment.TESTING
            debug = True
        else:
            environment = Environment.PRODUCTION
            debug = False

        default_async_mode = 'threading' if environment == Environment.TESTING else 'eventlet'

        config = AppConfig(
            # Core Flask settings
            secret_key=get_env_var('SECRET_KEY', DEFAULT_SECRET_KEY),
            debug=get_env_var('DEBUG', debug, bool),
            flask_env=flask_env,

            # Server settings
            host=get_env_var('HOST', '0.0.0.0'),
            port=get_env_var('PORT', 5000, int),
            socketio_async_mode=get_env_var('SOCKETIO_ASYNC_MODE', default_async_mode),
            cors_allowed_origins=get_env_var('SOCKETIO_CORS_ALLOWED_ORIGINS', [], list),

            # Room settings
            max_participants_per_room=get_env_var('MAX_PARTICIPANTS_PER_ROOM', 50, int),
            max_room_name_length=get_env_var('MAX_ROOM_NAME_LENGTH', 50, int),
            room_id_suffix_digits=get_env_var('ROOM_ID_SUFFIX_DIGITS', 4, int),
            room_id_max_attempts=get_env_var('ROOM_ID_MAX_ATTEMPTS', 5, int),
            enforce_room_lock=get_env_var('ENFORCE_ROOM_LOCK', True, bool),
            default_vote_system=get_env_var('DEFAULT_VOTE_SYSTEM', 'fibonacci'),
            max_story_url_length=get_env_var('MAX_STORY_URL_LENGTH', 2048, int),

            # Rate Limiting settings
            max_events_per_second=get_env_var('MAX_EVENTS_PER_SECOND', 10, int),
            max_events_per_minute=get_env_var('MAX_EVENTS_PER_MINUTE', 100, int),
            global_max_events_per_second=get_env_var('GLOBAL_MAX_EVENTS_PER_SECOND', 200, int),
            rate_limit_block_seconds=get_env_var('RATE_LIMIT_BLOCK_SECONDS', 60, int),

            # Gunicorn settings
            worker_connections=get_env_var('WORKER_CONNECTIONS', 1000, int),
            timeout=get_env_var('TIMEOUT', 30, int),
            keepalive=get_env_var('KEEPALIVE', 2, int),
            log_level=get_env_var('LOG_LEVEL', 'info'),

            # Environment
            environment=environment
        )

        # Apply any manual overrides
        for key, value in self._env_overrides.items():
            if hasattr(config, key):
                setattr(config, key, value)

        self._config = config
        self._logger.info(f"Configuration loaded for environment: {environment.value}")
        return config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """
        Load configuration from dictionary (useful for testing).

        Args:
            config_dict: Dictionary of configuration values

        Returns:
            Configured AppConfig instance
        """
        config_dict = dict(config_dict)
        if 'environment' in config_dict and isinstance(config_dict['environment'], str):
            config_dict['environment'] = Environment(config_dict['environment'])

        self._config = AppConfig(**config_dict)
        return self._config

    def override_setting(self, key: str, value: Any) -> 'ConfigurationFactory':
        """
        Override a specific configuration setting.

        Args:
            key: Configuration key to override
            value: New value for the setting

        Returns:
            Self for method chaining
        """
        self._env_overrides[key] = value

        # Update current config if loaded
        if self._config and hasattr(self._config, key):
            setattr(self._config, key, value)
            self._config._validate()  # Re-validate after change

        return self

    def get_config(self) -> AppConfig:
        """
        Get the current configuration.

        Returns:
            Current AppConfig instance

        Raises:
            ConfigError: If no configuration has been loaded
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() or load_from_dict() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        """Reset the factory (useful for testing)"""
        self._config = None
        self._env_overrides.clear()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert current configuration to dictionary"""
        if self._config is None:
            raise ConfigError("Configuration not loaded")

        config_dict = {}
        for field_info in self._config.__dataclass_fields__.values():
            value = getattr(self._config, field_info.name)
            if isinstance(value, Environment):
                config_dict[field_info.name] = value.value
            elif isinstance(value, list):
                config_dict[field_info.name] = list(value)
            else:
                config_dict[field_info.name] = value

        return config_dict

    def get_flask_config(self) -> Dict[str, Any]:
        """
        Get Flask-compatible configuration dictionary.

        Returns:
            Dictionary suitable for Flask app.config.update()
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded")

        return {
            'SECRET_KEY': self._config.secret_key,
            'DEBUG': self._config.debug,
            'ENV': self._config.flask_env,
            'TESTING': self._config.is_testing,
            'MAX_PARTICIPANTS_PER_ROOM': self._config.max_participants_per_room,
            'MAX_ROOM_NAME_LENGTH': self._config.max_room_name_length,
            'DEFAULT_VOTE_SYSTEM': self._config.default_vote_system,
        }


# Global factory instance
_config_factory = ConfigurationFactory()


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return _config_factory.get_config()


def load_config(env_prefix: str = '') -> AppConfig:
    """Load configuration from environment variables"""
    return _config_factory.load_from_environment(env_prefix)


def load_config_from_dict(config_dict: Dict[str, Any]) -> AppConfig:
    """Load configuration from dictionary"""
    return _config_factory.load_from_dict(config_dict)


def override_config(key: str, value: Any) -> ConfigurationFactory:
    """Override a configuration setting"""
    return _config_factory.override_setting(key, value)


def reset_config() -> ConfigurationFactory:
    """Reset configuration (for testing)"""
    return _config_factory.reset()

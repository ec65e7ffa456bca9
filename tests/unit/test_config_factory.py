"""
Configuration Factory Unit Tests
"""

from unittest.mock import patch

import pytest

from config_factory import (
    AppConfig,
    ConfigError,
    ConfigurationFactory,
    DEFAULT_SECRET_KEY,
    Environment,
)
from src.config.room_settings import RoomSettings


class TestAppConfig:

    def test_defaults(self):
        config = AppConfig()

        assert config.max_participants_per_room == 50
        assert config.room_id_suffix_digits == 4
        assert config.room_id_max_attempts == 5
        assert config.enforce_room_lock is True
        assert config.socketio_async_mode == 'eventlet'
        assert config.is_development

    @pytest.mark.parametrize("overrides", [
        {'port': 0},
        {'socketio_async_mode': 'asyncio'},
        {'max_participants_per_room': 0},
        {'room_id_suffix_digits': 1},
        {'room_id_max_attempts': 0},
        {'default_vote_system': ''},
        {'max_events_per_second': 50, 'max_events_per_minute': 10},
    ])
    def test_invalid_values_raise(self, overrides):
        with pytest.raises(ConfigError):
            AppConfig(**overrides)

    def test_production_requires_secret_key(self):
        with pytest.raises(ConfigError):
            AppConfig(environment=Environment.PRODUCTION, secret_key=DEFAULT_SECRET_KEY)

        assert AppConfig(environment=Environment.PRODUCTION, secret_key='s3cret').is_production


class TestConfigurationFactory:

    def setup_method(self):
        self.factory = ConfigurationFactory()
        self.factory.reset()

    def test_singleton(self):
        assert ConfigurationFactory() is self.factory

    def test_get_config_before_load_raises(self):
        with pytest.raises(ConfigError):
            self.factory.get_config()

    def test_testing_flag_selects_testing_environment(self):
        with patch.dict('os.environ', {'TESTING': '1'}, clear=False):
            config = self.factory.load_from_environment()

        assert config.is_testing
        assert config.socketio_async_mode == 'threading'

    def test_environment_variables(self):
        env = {
            'TESTING': '0',
            'FLASK_ENV': 'production',
            'SECRET_KEY': 'prod-key',
            'PORT': '8080',
            'MAX_PARTICIPANTS_PER_ROOM': '12',
            'ENFORCE_ROOM_LOCK': 'false',
            'SOCKETIO_CORS_ALLOWED_ORIGINS': 'https://a.example, https://b.example',
        }
        with patch.dict('os.environ', env, clear=False):
            config = self.factory.load_from_environment()

        assert config.is_production
        assert config.debug is False
        assert config.port == 8080
        assert config.max_participants_per_room == 12
        assert config.enforce_room_lock is False
        assert config.cors_allowed_origins == ['https://a.example', 'https://b.example']
        assert config.socketio_async_mode == 'eventlet'

    def test_invalid_integer_falls_back_to_default(self):
        with patch.dict('os.environ', {'PORT': 'not-a-port'}, clear=False):
            config = self.factory.load_from_environment()

        assert config.port == 5000

    def test_load_from_dict_and_to_dict(self):
        self.factory.load_from_dict({'environment': 'testing', 'max_room_name_length': 30})

        as_dict = self.factory.to_dict()
        assert as_dict['environment'] == 'testing'
        assert as_dict['max_room_name_length'] == 30

    def test_override_setting_revalidates(self):
        self.factory.load_from_dict({})
        self.factory.override_setting('room_id_max_attempts', 3)
        assert self.factory.get_config().room_id_max_attempts == 3

        with pytest.raises(ConfigError):
            self.factory.override_setting('room_id_max_attempts', 0)

    def test_flask_config(self):
        self.factory.load_from_dict({'environment': 'testing', 'secret_key': 'abc'})

        flask_config = self.factory.get_flask_config()

        assert flask_config['SECRET_KEY'] == 'abc'
        assert flask_config['TESTING'] is True
        assert flask_config['MAX_PARTICIPANTS_PER_ROOM'] == 50


class TestRoomSettings:

    def test_reads_from_config(self):
        settings = RoomSettings(AppConfig(max_participants_per_room=7, enforce_room_lock=False))

        assert settings.max_participants_per_room == 7
        assert settings.enforce_room_lock is False

    def test_defaults_when_config_unavailable(self):
        ConfigurationFactory().reset()

        settings = RoomSettings()

        assert settings.max_participants_per_room == 50
        assert settings.room_id_max_attempts == 5
        assert settings.default_vote_system == 'fibonacci'

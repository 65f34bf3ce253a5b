"""Tests for configuration classes."""

import dataclasses
import os
import pytest
from unittest.mock import patch

from config import (
    AppConfig,
    CORSConfig,
    GameConfig,
    LogConfig,
    RateLimitConfig,
    RedisConfig,
    SecurityConfig,
    _parse_cors_origins,
)


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        """Test that default CORS origins are set correctly."""
        with patch.dict(os.environ, {}, clear=True):
            config = CORSConfig()

            assert "http://localhost:8000" in config.allowed_origins

    def test_cors_parses_origins_with_whitespace(self):
        """Test that CORS origins are split and stripped."""
        env_origins = "  http://example.com  ,  http://localhost:3000  ,"
        with patch.dict(os.environ, {"CORS_ORIGINS": env_origins}):
            origins = _parse_cors_origins()

            assert origins == ["http://example.com", "http://localhost:3000"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        """Test default rate limit values."""
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()

            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        """Test rate limit configuration from environment."""
        with patch.dict(
            os.environ,
            {"RATE_LIMIT_ENABLED": "FALSE", "RATE_LIMIT_RPM": "120"},
        ):
            config = RateLimitConfig()

            assert config.enabled is False
            assert config.requests_per_minute == 120


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_auto_generates(self):
        """Test that secret key is auto-generated when not in env."""
        with patch.dict(os.environ, {}, clear=True):
            config = SecurityConfig()

            assert config.secret_key
            assert config.secret_key != SecurityConfig().secret_key

    def test_secret_key_from_env(self):
        """Test that secret key is read from environment."""
        with patch.dict(os.environ, {"SECRET_KEY": "my-super-secret-key-12345"}):
            assert SecurityConfig().secret_key == "my-super-secret-key-12345"


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_redis_defaults(self):
        """Test default Redis configuration."""
        with patch.dict(os.environ, {}, clear=True):
            config = RedisConfig()

            assert config.enabled is False
            assert config.host == "localhost"
            assert config.port == 6379
            assert config.db == 0
            assert config.password is None
            assert config.url == "redis://localhost:6379/0"

    def test_redis_from_env(self):
        """Test Redis configuration from environment."""
        with patch.dict(
            os.environ,
            {
                "REDIS_ENABLED": "true",
                "REDIS_HOST": "redis.example.com",
                "REDIS_PORT": "6380",
                "REDIS_DB": "1",
                "REDIS_PASSWORD": "secret123",
            },
        ):
            config = RedisConfig()

            assert config.enabled is True
            assert config.url == "redis://:secret123@redis.example.com:6380/1"


class TestGameConfig:
    """Tests for GameConfig class."""

    def test_game_config_defaults(self):
        """Test default table configuration."""
        with patch.dict(os.environ, {}, clear=True):
            config = GameConfig()

            assert config.num_decks == 3
            assert config.reshuffle_threshold == 52
            assert config.max_idle_seconds == 3600

    def test_game_config_from_env(self):
        """Test table configuration from environment."""
        with patch.dict(os.environ, {"RESHUFFLE_THRESHOLD": "20", "GAME_MAX_IDLE": "60"}):
            config = GameConfig()

            assert config.reshuffle_threshold == 20
            assert config.max_idle_seconds == 60

    def test_game_config_frozen(self):
        """Test that GameConfig is frozen (immutable)."""
        config = GameConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.num_decks = 8


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        """Test default AppConfig values."""
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()

            assert config.debug is False
            assert config.host == "0.0.0.0"
            assert config.port == 8000
            assert config.log.level == "INFO"

    def test_log_level_from_env(self):
        """Test the log level is read and upper-cased."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert LogConfig().level == "DEBUG"

    def test_app_config_has_nested_configs(self):
        """Test that AppConfig has nested configuration objects."""
        config = AppConfig()

        assert isinstance(config.redis, RedisConfig)
        assert isinstance(config.game, GameConfig)
        assert isinstance(config.cors, CORSConfig)
        assert isinstance(config.rate_limit, RateLimitConfig)
        assert isinstance(config.security, SecurityConfig)
        assert isinstance(config.log, LogConfig)

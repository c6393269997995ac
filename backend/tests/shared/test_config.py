"""Tests for shared/config.py."""

import pytest
from unittest.mock import patch
import os

from pydantic import ValidationError

from shared.config import Settings, get_settings


class TestSettings:
    def test_default_values(self):
        """Settings should have sensible defaults."""
        settings = Settings(_env_file=None)
        assert settings.app_name == "QHub API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.host == "0.0.0.0"
        assert settings.app_version == "0.1.0"
        assert settings.storage_backend == "memory"

    def test_token_and_password_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.jwt_algorithm == "HS256"
        assert settings.token_ttl_hours == 24
        assert settings.password_min_length == 8
        assert settings.argon2_time_cost == 3
        assert settings.argon2_memory_cost == 65536
        assert settings.argon2_parallelism == 4

    def test_loads_from_env(self):
        """Settings should load from environment variables."""
        with patch.dict(os.environ, {"DEBUG": "true", "PORT": "9000"}):
            settings = Settings(_env_file=None)
            assert settings.debug is True
            assert settings.port == 9000

    def test_loads_jwt_config_from_env(self):
        with patch.dict(os.environ, {"JWT_SECRET": "s3cret", "TOKEN_TTL_HOURS": "2"}):
            settings = Settings(_env_file=None)
            assert settings.jwt_secret == "s3cret"
            assert settings.token_ttl_hours == 2

    def test_loads_supabase_config_from_env(self):
        """Settings should load Supabase configuration from environment variables."""
        with patch.dict(os.environ, {
            "STORAGE_BACKEND": "supabase",
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "test-service-key",
        }):
            settings = Settings(_env_file=None)
            assert settings.storage_backend == "supabase"
            assert settings.supabase_url == "https://test.supabase.co"
            assert settings.supabase_service_role_key == "test-service-key"

    def test_rejects_unknown_storage_backend(self):
        with patch.dict(os.environ, {"STORAGE_BACKEND": "redis"}):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestGetSettings:
    def test_get_settings_returns_settings_instance(self):
        """get_settings should return a Settings instance."""
        get_settings.cache_clear()
        settings = get_settings()
        assert isinstance(settings, Settings)

    def test_get_settings_caches(self):
        """get_settings should return cached instance."""
        get_settings.cache_clear()
        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2

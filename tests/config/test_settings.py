"""Tests for runtime settings."""

import pytest
from datetime import timedelta

from pydantic import ValidationError

from neo_jwt.application.validators import ValidationParameters
from neo_jwt.config.settings import JwtSettings, get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestJwtSettings:
    """Test cases for JwtSettings."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        for name in ("NEO_JWT_CLOCK_SKEW_SECONDS", "NEO_JWT_CACHE_MAX_SIZE"):
            monkeypatch.delenv(name, raising=False)
        settings = JwtSettings(_env_file=None)
        assert settings.clock_skew == timedelta(minutes=5)
        assert settings.cache_max_size == 1000
        assert settings.max_token_size_bytes == 8192
        assert settings.revocation_default_ttl == timedelta(days=7)
        assert settings.access_token_lifetime == timedelta(hours=1)
        assert settings.refresh_token_lifetime == timedelta(days=30)

    def test_environment_override(self, monkeypatch, fresh_settings):
        """Test NEO_JWT_ variables override defaults."""
        monkeypatch.setenv("NEO_JWT_CLOCK_SKEW_SECONDS", "30")
        monkeypatch.setenv("NEO_JWT_CACHE_EVICT_IN_BACKGROUND", "false")

        settings = get_settings()

        assert settings.clock_skew == timedelta(seconds=30)
        assert settings.cache_evict_in_background is False
        assert get_settings() is settings

    def test_negative_values_rejected(self):
        """Test field constraints."""
        with pytest.raises(ValidationError):
            JwtSettings(clock_skew_seconds=-1)
        with pytest.raises(ValidationError):
            JwtSettings(cache_max_size=0)

    def test_parameters_from_settings(self):
        """Test validation parameters pick up settings defaults."""
        settings = JwtSettings(clock_skew_seconds=10, max_token_size_bytes=100, cache_duration_seconds=20)
        parameters = ValidationParameters.from_settings(settings, validate_issuer=False)
        assert parameters.clock_skew == timedelta(seconds=10)
        assert parameters.max_token_size_bytes == 100
        assert parameters.cache_duration == timedelta(seconds=20)
        assert parameters.validate_issuer is False

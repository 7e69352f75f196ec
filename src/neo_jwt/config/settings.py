"""
Runtime settings for neo-jwt.

Defaults for clock skew, cache sizing, revocation bookkeeping and token
lifetimes, overridable through ``NEO_JWT_*`` environment variables or a
``.env`` file.
"""
from datetime import timedelta
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class JwtSettings(BaseSettings):
    """Token lifecycle settings."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_JWT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Validation
    clock_skew_seconds: int = Field(default=300, ge=0)
    max_token_size_bytes: int = Field(default=8192, gt=0)

    # Caching
    cache_max_size: int = Field(default=1000, gt=0)
    cache_duration_seconds: int = Field(default=300, gt=0)
    cache_evict_in_background: bool = Field(default=True)

    # Revocation and repository bookkeeping
    revocation_default_ttl_days: int = Field(default=7, gt=0)
    repository_cleanup_interval_seconds: int = Field(default=600, gt=0)

    # Token lifetimes used by the refresher
    access_token_lifetime_seconds: int = Field(default=3600, gt=0)
    refresh_token_lifetime_days: int = Field(default=30, gt=0)

    @property
    def clock_skew(self) -> timedelta:
        return timedelta(seconds=self.clock_skew_seconds)

    @property
    def cache_duration(self) -> timedelta:
        return timedelta(seconds=self.cache_duration_seconds)

    @property
    def revocation_default_ttl(self) -> timedelta:
        return timedelta(days=self.revocation_default_ttl_days)

    @property
    def repository_cleanup_interval(self) -> timedelta:
        return timedelta(seconds=self.repository_cleanup_interval_seconds)

    @property
    def access_token_lifetime(self) -> timedelta:
        return timedelta(seconds=self.access_token_lifetime_seconds)

    @property
    def refresh_token_lifetime(self) -> timedelta:
        return timedelta(days=self.refresh_token_lifetime_days)


@lru_cache()
def get_settings() -> JwtSettings:
    """Get cached settings instance."""
    return JwtSettings()

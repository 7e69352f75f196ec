"""Configuration for neo-jwt: runtime settings and logging setup."""

from .settings import JwtSettings, get_settings
from .logging_config import (
    LoggingConfig,
    LogLevel,
    LogVerbosity,
    LogFormat,
    setup_logging,
    get_logger,
    mask_token,
)

__all__ = [
    "JwtSettings",
    "get_settings",
    "LoggingConfig",
    "LogLevel",
    "LogVerbosity",
    "LogFormat",
    "setup_logging",
    "get_logger",
    "mask_token",
]

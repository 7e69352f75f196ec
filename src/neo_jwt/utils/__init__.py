"""Utility helpers for neo-jwt."""

from . import base64url
from .clock import Clock, ensure_utc, resolve_clock, to_unix_seconds, utc_now

__all__ = [
    "base64url",
    "Clock",
    "ensure_utc",
    "resolve_clock",
    "to_unix_seconds",
    "utc_now",
]

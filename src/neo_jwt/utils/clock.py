"""Time helpers shared by the builder, validator and stores."""

from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_unix_seconds(value: datetime) -> int:
    """Whole Unix seconds for a datetime (naive values are UTC)."""
    return int(ensure_utc(value).timestamp())


def resolve_clock(clock: Optional[Clock]) -> Clock:
    return clock if clock is not None else utc_now

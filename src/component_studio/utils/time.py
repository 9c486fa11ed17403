"""Timezone-aware timestamp helpers shared by models and services."""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with a UTC offset; naive values (SQLite round-trips) are assumed UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def epoch_millis() -> int:
    return int(utc_now().timestamp() * 1000)

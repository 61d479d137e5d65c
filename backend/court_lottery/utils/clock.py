"""
UTC timestamps.

Every stored timestamp is timezone-aware UTC. SQLite drops the offset on
the way back, so values read from it come back naive; as_utc() puts the
UTC tzinfo back before comparing against utcnow().
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

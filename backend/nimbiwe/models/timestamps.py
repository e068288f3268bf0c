"""Application-side timestamps (SQLite's CURRENT_TIMESTAMP has one-second resolution)"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

"""
SQLAlchemy declarative base and shared utilities for all models.

Convention:
    - Each table lives in its own file under `userstore/db/models/`
    - Every model file imports `Base` from here
    - The `__init__.py` re-exports all models so `Base.metadata` sees them
"""

from datetime import datetime, timezone

from sqlalchemy import text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


# ─── Shared helpers ───────────────────────────
def utcnow() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


def isoformat(value: datetime) -> str:
    """ISO-8601 with millisecond precision; UTC is written as a trailing `Z`."""
    stamp = value.isoformat(timespec="milliseconds")
    if stamp.endswith("+00:00"):
        stamp = stamp[: -len("+00:00")] + "Z"
    return stamp


# Server-side equivalent of isoformat(utcnow()) for TEXT timestamp columns.
ISO_NOW_DEFAULT = text("(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))")

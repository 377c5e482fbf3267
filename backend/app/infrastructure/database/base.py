"""SQLAlchemy ORM base and shared column helpers."""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for the CRA aggregate's ORM models."""

    pass


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp used as the default for every time column."""
    return datetime.now(timezone.utc)

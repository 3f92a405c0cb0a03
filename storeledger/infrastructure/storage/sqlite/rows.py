"""Row conversion helpers shared by the SQLite stores."""

from datetime import datetime


def to_db_time(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def from_db_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None

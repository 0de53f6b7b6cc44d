"""Row conversion helpers shared by the SQLite stores."""

from datetime import date, datetime

from stockroom.core.entities.base import utc_now


def parse_timestamp(value: str | None, default: datetime | None = None) -> datetime | None:
    """Parse an ISO or SQLite 'YYYY-MM-DD HH:MM:SS' timestamp."""
    if not value:
        return default
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return default


def parse_required_timestamp(value: str | None) -> datetime:
    return parse_timestamp(value) or utc_now()


def parse_day(value: str | None) -> date:
    if value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    return date.today()

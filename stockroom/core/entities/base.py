"""Shared helpers for domain entities."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Naive UTC timestamp, matching SQLite's datetime('now')."""
    return datetime.now(UTC).replace(tzinfo=None)

# src/snippetbin/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_iso(value: datetime) -> str:
    """Render a datetime in the fixed-width ``YYYY-MM-DDTHH:MM:SS.mmmZ`` form.

    Fixed width keeps lexicographic and chronological order identical.
    """
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def utcnow_iso() -> str:
    """Return the current UTC time as a canonical ISO 8601 string."""
    return to_iso(utcnow())


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 string into an aware datetime, or None if unparseable.

    Naive values are taken to be UTC.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed

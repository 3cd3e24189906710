"""Datetime helpers.

Cassandra returns naive datetimes and clients may send naive ones. Both are
read as UTC so comparisons with ``datetime.now(UTC)`` never mix naive and
aware values.
"""

from datetime import UTC, datetime


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware.

    Examples:
        >>> ensure_utc_aware(datetime(2030, 1, 1)).tzinfo
        datetime.timezone.utc
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)

"""Time utilities for timezone-aware UTC datetimes and sortable timestamps."""

import threading
from datetime import UTC, datetime, timedelta

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_lock = threading.Lock()
_last_issued: datetime | None = None


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(UTC).strftime(TIMESTAMP_FORMAT)


def new_timestamp() -> str:
    """Return a fixed-width ISO-8601 UTC timestamp for item `created`/`updated` fields.

    Values issued by one process are strictly increasing, so two items created
    back to back never share a timestamp and string order matches creation order.
    """
    global _last_issued
    with _lock:
        now = utc_now()
        if _last_issued is not None and now <= _last_issued:
            now = _last_issued + timedelta(microseconds=1)
        _last_issued = now
    return format_timestamp(now)

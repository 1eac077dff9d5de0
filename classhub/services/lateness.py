from datetime import datetime, timezone
from typing import Optional

ON_TIME = "on_time"
LATE = "late"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to an aware UTC datetime.

    SQLite hands back naive datetimes; everything is stored in UTC, so a
    naive value is read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def classify_submission(due_date: Optional[datetime], submitted_at: datetime) -> str:
    """Return ``"on_time"`` or ``"late"`` for a submission.

    No due date means every submission is on time. Submitting exactly at the
    due instant is on time. Nothing is stored: callers recompute this on
    every read.
    """
    if due_date is None:
        return ON_TIME
    if as_utc(submitted_at) <= as_utc(due_date):
        return ON_TIME
    return LATE


def minutes_late(due_date: Optional[datetime], submitted_at: datetime) -> Optional[int]:
    if due_date is None:
        return None
    delta = as_utc(submitted_at) - as_utc(due_date)
    if delta.total_seconds() <= 0:
        return None
    return int(delta.total_seconds() // 60)

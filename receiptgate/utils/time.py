from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def hours_ago(hours: int, *, now: datetime | None = None) -> datetime:
    return (now or utc_now()) - timedelta(hours=int(hours))


def epoch_millis(dt: datetime | None = None) -> int:
    dt = dt or utc_now()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)

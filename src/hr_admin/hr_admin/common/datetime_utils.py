from __future__ import annotations

from datetime import date, datetime, time, timedelta


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def hours_between(start: time, end: time) -> float:
    """Hours from `start` to `end`; an earlier end time means the span crosses midnight."""
    anchor = date(2000, 1, 1)
    start_dt = datetime.combine(anchor, start)
    end_dt = datetime.combine(anchor, end)
    if end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return round((end_dt - start_dt).total_seconds() / 3600, 2)

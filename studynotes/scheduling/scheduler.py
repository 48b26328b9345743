from __future__ import annotations

"""Redo-date arithmetic and due-status classification.

All functions are pure: "today" is always passed in by the caller.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Optional, Tuple, Union

DateLike = Union[date, datetime, str, None]

DUE_SOON_DAYS = 3
SATURDAY = 5  # date.weekday(): Monday=0 .. Sunday=6
SUNDAY = 6


class DueStatus(str, Enum):
    NONE = "none"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_SOON = "due_soon"
    UPCOMING = "upcoming"


WEEKEND = "weekend"


@dataclass(frozen=True)
class RedoInterval:
    key: str
    label: str
    offset: Union[int, str]  # day count or WEEKEND


REDO_INTERVALS: Tuple[RedoInterval, ...] = (
    RedoInterval("1d", "Tomorrow", 1),
    RedoInterval("3d", "In 3 days", 3),
    RedoInterval("1w", "In 1 week", 7),
    RedoInterval("2w", "In 2 weeks", 14),
    RedoInterval("1m", "In 1 month", 30),
    RedoInterval("weekend", "This weekend", WEEKEND),
)


def _parse(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def calendar_date(value: DateLike, tz: Optional[tzinfo] = None) -> Optional[date]:
    """Reduce a date, datetime or ISO string to a calendar date.

    Aware datetimes are first converted to ``tz`` when one is given, so that
    "which day" is judged in the caller's timezone. Returns None for missing
    or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = _parse(value)
        if value is None:
            return None
    if isinstance(value, datetime):
        if value != value:  # NaT
            return None
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    return None


def add_days(base: Union[date, datetime], n: int) -> date:
    """Calendar date ``n`` days after ``base`` (``n`` may be negative)."""
    return calendar_date(base) + timedelta(days=int(n))


def next_weekend(today: Union[date, datetime]) -> date:
    """Date of this weekend's Saturday.

    Saturday and Sunday return ``today`` itself; weekdays advance to the
    coming Saturday.
    """
    d = calendar_date(today)
    if d.weekday() in (SATURDAY, SUNDAY):
        return d
    return d + timedelta(days=SATURDAY - d.weekday())


def _reference_day(today: Union[date, datetime], tz: Optional[tzinfo]) -> date:
    # Without an explicit tz, an aware "today" is read in its own timezone
    if tz is None and isinstance(today, datetime):
        tz = today.tzinfo
    return calendar_date(today, tz)


def classify(
    scheduled: DateLike,
    today: Union[date, datetime],
    *,
    due_soon_days: int = DUE_SOON_DAYS,
    tz: Optional[tzinfo] = None,
) -> DueStatus:
    """Classify a scheduled redo date relative to ``today`` by calendar date.

    A redo date is a plain calendar day and is read as written, never shifted
    into ``tz``; only ``today`` is converted.
    """
    when = calendar_date(scheduled)
    if when is None:
        return DueStatus.NONE
    ref = _reference_day(today, tz)
    if when < ref:
        return DueStatus.OVERDUE
    if when == ref:
        return DueStatus.DUE_TODAY
    if when <= ref + timedelta(days=due_soon_days):
        return DueStatus.DUE_SOON
    return DueStatus.UPCOMING


def days_until(scheduled: DateLike, today: Union[date, datetime], tz: Optional[tzinfo] = None) -> Optional[int]:
    when = calendar_date(scheduled)
    if when is None:
        return None
    return (when - _reference_day(today, tz)).days


def get_interval(choice: str) -> RedoInterval:
    """Look up a catalog entry by key or label (case-insensitive)."""
    needle = str(choice).strip().lower()
    for iv in REDO_INTERVALS:
        if needle in (iv.key.lower(), iv.label.lower()):
            return iv
    raise KeyError(f"Unknown redo interval: {choice}")


def resolve_interval(choice: str, today: Union[date, datetime]) -> date:
    """Turn one interval choice into a concrete redo date."""
    iv = get_interval(choice)
    if iv.offset == WEEKEND:
        return next_weekend(today)
    return add_days(today, int(iv.offset))

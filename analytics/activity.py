from __future__ import annotations

"""Trailing seven-day creation histogram."""

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List

from studynotes.scheduling import add_days
from .prepare import NowLike, records_frame, resolve_now

ACTIVITY_DAYS = 7
DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class DayActivity:
    day: date
    label: str
    count: int


def weekly_activity(records: Iterable[Any], today: NowLike) -> List[DayActivity]:
    """Records created per calendar day, oldest first, ending on ``today``.

    Always returns exactly seven entries.
    """
    _, ref, tz = resolve_now(today)
    per_day = records_frame(records, tz)["created_date"].dropna().value_counts()
    out: List[DayActivity] = []
    for back in range(ACTIVITY_DAYS - 1, -1, -1):
        d = add_days(ref, -back)
        out.append(DayActivity(day=d, label=DAY_LABELS[d.weekday()], count=int(per_day.get(d, 0))))
    return out

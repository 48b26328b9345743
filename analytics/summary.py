from __future__ import annotations

"""Headline study statistics and redo-attempt outcomes."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from storage.schema import ATTEMPT_STATUSES, coerce_records, visible_attempts
from studynotes.scheduling import DueStatus, classify
from .config import AnalyticsConfig
from .prepare import NowLike, records_frame, resolve_now


@dataclass(frozen=True)
class SummaryStats:
    total: int
    overdue_count: int
    due_today_count: int
    due_soon_count: int
    completed_count: int
    this_week_count: int
    completion_rate: float


def summary_stats(records: Iterable[Any], now: NowLike, cfg: Optional[AnalyticsConfig] = None) -> SummaryStats:
    """Compute totals, due counts, completion and the rolling "this week" count.

    Due counts compare calendar dates; the rolling count compares instants
    (``created_at >= now - rolling_window_days``).
    """
    cfg = cfg or AnalyticsConfig()
    instant, today, tz = resolve_now(now)
    df = records_frame(records, tz)

    status = df["scheduled_date"].map(lambda d: classify(d, today, due_soon_days=cfg.due_soon_days).value)
    counts = status.value_counts()

    total = int(len(df))
    completed = int(df["is_resolved"].sum())
    cutoff = instant - pd.Timedelta(days=cfg.rolling_window_days)
    this_week = int((df["created_at"] >= cutoff).sum())

    return SummaryStats(
        total=total,
        overdue_count=int(counts.get(DueStatus.OVERDUE.value, 0)),
        due_today_count=int(counts.get(DueStatus.DUE_TODAY.value, 0)),
        due_soon_count=int(counts.get(DueStatus.DUE_SOON.value, 0)),
        completed_count=completed,
        this_week_count=this_week,
        completion_rate=(completed / total) if total else 0.0,
    )


def attempt_outcomes(records: Iterable[Any]) -> Dict[str, int]:
    """Count visible redo attempts by status across all records."""
    out = {s: 0 for s in ATTEMPT_STATUSES}
    for r in coerce_records(records):
        for a in visible_attempts(r):
            out[a.status] += 1
    return out

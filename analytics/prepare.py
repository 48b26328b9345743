from __future__ import annotations

"""Turn record snapshots into a DataFrame with derived columns."""

from datetime import date, datetime, timezone, tzinfo
from typing import Any, Iterable, Tuple, Union

import pandas as pd

from storage.schema import TEXT_FIELDS, Record, coerce_records
from studynotes.scheduling import calendar_date

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}
DEFAULT_PRIORITY_RANK = PRIORITY_RANK["medium"]

FRAME_COLUMNS = [
    "id",
    "kind",
    "subject_id",
    "module_id",
    *TEXT_FIELDS,
    "mistake_types",
    "priority",
    "priority_rank",
    "is_important",
    "is_resolved",
    "created_at",
    "scheduled_redo",
    "created_date",
    "scheduled_date",
]

NowLike = Union[date, datetime, str]


def resolve_now(now: NowLike) -> Tuple[pd.Timestamp, date, tzinfo]:
    """Split a caller-supplied "now" into (instant, calendar day, timezone).

    A plain date means midnight UTC of that day; naive datetimes are UTC.
    """
    if isinstance(now, str):
        now = datetime.fromisoformat(now.strip())
    if not isinstance(now, datetime):
        now = datetime(now.year, now.month, now.day)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return pd.Timestamp(now), now.date(), now.tzinfo


def priority_rank(priority: Any) -> int:
    return PRIORITY_RANK.get(str(priority or "").strip().lower(), DEFAULT_PRIORITY_RANK)


def _row(r: Record, tz: tzinfo) -> dict:
    row = {
        "id": r.id,
        "kind": r.kind,
        "subject_id": r.subject_id,
        "module_id": r.module_id,
        "mistake_types": tuple(r.mistake_types),
        "priority": r.priority,
        "priority_rank": priority_rank(r.priority),
        "is_important": bool(r.is_important),
        "is_resolved": bool(r.is_resolved),
        "created_at": r.created_at,
        "scheduled_redo": r.scheduled_redo,
        "created_date": calendar_date(r.created_at, tz),
        "scheduled_date": calendar_date(r.scheduled_redo),
    }
    for col in TEXT_FIELDS:
        row[col] = getattr(r, col) or ""
    return row


def records_frame(records: Iterable[Any], tz: tzinfo = timezone.utc) -> pd.DataFrame:
    """Build one row per record, positionally indexed in input order.

    ``created_date`` is the calendar date in ``tz``; ``scheduled_date`` is the
    redo date as stored.
    """
    rows = [_row(r, tz) for r in coerce_records(records)]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["created_at"] = pd.to_datetime(df["created_at"], utc=True)
    df["scheduled_redo"] = pd.to_datetime(df["scheduled_redo"], utc=True)
    df["priority_rank"] = df["priority_rank"].astype("int64")
    df["is_important"] = df["is_important"].astype(bool)
    df["is_resolved"] = df["is_resolved"].astype(bool)
    return df.reset_index(drop=True)

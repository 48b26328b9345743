from __future__ import annotations

"""Search, filter and sort a record snapshot."""

from typing import Any, Iterable, List, Optional

import pandas as pd

from storage.schema import Record, coerce_records
from .prepare import records_frame

SEARCH_FIELDS = ["question", "correct_answer", "notes", "topic"]
SORT_KEYS = ("newest", "oldest", "subject", "due", "priority")


def _search_mask(df: pd.DataFrame, text: str) -> pd.Series:
    needle = text.lower()
    mask = pd.Series(False, index=df.index)
    for col in SEARCH_FIELDS:
        mask |= df[col].astype(str).str.lower().str.contains(needle, regex=False)
    return mask


def _sorted(df: pd.DataFrame, sort_key: str) -> pd.DataFrame:
    if sort_key == "newest":
        return df.sort_values("created_at", ascending=False, na_position="last", kind="stable")
    if sort_key == "oldest":
        return df.sort_values("created_at", ascending=True, na_position="last", kind="stable")
    if sort_key == "subject":
        return df.assign(_subject=df["subject_id"].fillna("").astype(str)).sort_values("_subject", kind="stable")
    if sort_key == "due":
        return df.sort_values("scheduled_redo", ascending=True, na_position="last", kind="stable")
    if sort_key == "priority":
        return df.sort_values("priority_rank", kind="stable")
    raise ValueError(f"Unknown sort key: {sort_key}")


def filter_and_sort(
    records: Iterable[Any],
    *,
    search_text: Optional[str] = None,
    subject_id: Optional[str] = None,
    type_id: Optional[str] = None,
    sort_key: str = "newest",
    important_only: bool = False,
) -> List[Record]:
    """Return the matching records in the requested order.

    - search_text: case-insensitive substring of question, correct answer,
      notes or topic (any one is enough)
    - subject_id / type_id: exact match; None matches everything
    - sort_key: newest | oldest | subject | due | priority; ties keep input order
    """
    items = coerce_records(records)
    df = records_frame(items)
    if df.empty:
        if sort_key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {sort_key}")
        return []

    mask = pd.Series(True, index=df.index)
    if search_text:
        mask &= _search_mask(df, search_text)
    if subject_id is not None:
        mask &= df["subject_id"] == subject_id
    if type_id is not None:
        mask &= df["mistake_types"].map(lambda labels: type_id in labels).astype(bool)
    if important_only:
        mask &= df["is_important"]

    out = _sorted(df[mask], sort_key)
    return [items[i] for i in out.index]

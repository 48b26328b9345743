"""Redo scheduling: interval catalog, date arithmetic, due classification."""

from .scheduler import (  # noqa: F401
    DUE_SOON_DAYS,
    REDO_INTERVALS,
    WEEKEND,
    DueStatus,
    RedoInterval,
    add_days,
    calendar_date,
    classify,
    days_until,
    get_interval,
    next_weekend,
    resolve_interval,
)

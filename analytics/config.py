from __future__ import annotations

"""Analytics configuration (thresholds) using Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Thresholds for due classification and rolling counts.

    - due_soon_days: a redo this many days ahead (or fewer) is "due soon"
    - rolling_window_days: lookback for the "this week" count
    """

    due_soon_days: int = Field(3, ge=0)
    rolling_window_days: int = Field(7, gt=0)

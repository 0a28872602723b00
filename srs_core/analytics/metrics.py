"""
Metric computations for review analytics.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, tzinfo
from typing import Optional

import pandas as pd

from srs_core.fsrs.memory_state import ReviewState
from srs_core.session_builders.pool_utils import civil_date, resolve_timezone


def build_day_index(start: date, days: int) -> pd.DatetimeIndex:
    """
    Dense civil-day index of length days starting at start.
    """
    return pd.date_range(start=pd.Timestamp(start), periods=max(0, days), freq="D")


def forecast_due_counts(
    states: Iterable[ReviewState],
    start: date,
    days: int,
    *,
    tz: Optional[tzinfo] = None
) -> pd.Series:
    """
    Number of cards due on each of the next `days` civil days.

    Overdue cards are counted on start; cards due after the window are left out.
    """
    tz = resolve_timezone(tz)
    day_index = build_day_index(start, days)
    due_days = [civil_date(s.next_review_date, tz) for s in states]
    if not due_days or len(day_index) == 0:
        return pd.Series(0, index=day_index, dtype="int64")

    first_day = pd.Timestamp(start)
    due = pd.Series(pd.to_datetime(due_days))
    due = due.where(due >= first_day, first_day)
    counts = due.value_counts().sort_index()
    return counts.reindex(day_index, fill_value=0).astype("int64")


def daily_retention(
    states: Iterable[ReviewState],
    *,
    tz: Optional[tzinfo] = None
) -> pd.Series:
    """
    Share of successful recalls per civil review day.
    """
    tz = resolve_timezone(tz)
    rows = [
        {"day": civil_date(entry.date, tz), "success": not entry.is_failure}
        for state in states
        for entry in state.review_history
    ]
    if not rows:
        return pd.Series(dtype="float64")

    df = pd.DataFrame(rows)
    df["day"] = pd.to_datetime(df["day"])
    return df.groupby("day")["success"].mean().sort_index().astype("float64")

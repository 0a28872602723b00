"""
Load balancer.

Spreads due dates so no civil day holds more than max_per_day reviews.
Overflow is pushed forward one day at a time, most stable cards first,
until every card fits.
"""

from __future__ import annotations

import dataclasses
import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

from srs_core.fsrs.memory_state import ReviewState, as_utc
from srs_core.session_builders.pool_utils import (
    civil_date,
    fragility_key,
    resolve_timezone,
)

logger = logging.getLogger(__name__)


def _move_to_day(value: datetime, day: date, tz: tzinfo) -> datetime:
    """Same local time-of-day, different civil day."""
    local = as_utc(value).astimezone(tz)
    return datetime.combine(day, local.time(), tzinfo=tz)


def balance_load(
    states: Iterable[ReviewState],
    max_per_day: int,
    *,
    tz: Optional[tzinfo] = None
) -> list[ReviewState]:
    """
    Redistribute next_review_date so each day has at most max_per_day cards.

    Args:
        states: Review states to balance
        max_per_day: Daily capacity (at least 1)
        tz: Review timezone (defaults to REVIEW_TIMEZONE)

    Returns:
        All states, ordered by their (possibly new) day and then by
        stability. Only next_review_date ever changes.
    """
    if max_per_day < 1:
        raise ValueError(f"max_per_day must be at least 1, got {max_per_day}")
    tz = resolve_timezone(tz)

    by_day: dict[date, list[ReviewState]] = defaultdict(list)
    for state in states:
        by_day[civil_date(state.next_review_date, tz)].append(state)

    if not by_day:
        return []

    result: list[ReviewState] = []
    overflow: list[ReviewState] = []
    deferred = 0
    day = min(by_day)
    last_day = max(by_day)

    while day <= last_day or overflow:
        day_states = by_day.pop(day, []) + overflow
        day_states.sort(key=fragility_key)

        taken = day_states[:max_per_day]
        excess = day_states[max_per_day:]

        for state in taken:
            if civil_date(state.next_review_date, tz) != day:
                state = dataclasses.replace(
                    state, next_review_date=_move_to_day(state.next_review_date, day, tz)
                )
            result.append(state)

        deferred += len(excess)
        overflow = excess
        day += timedelta(days=1)

    logger.info("Balanced %d reviews at %d/day, %d deferrals", len(result), max_per_day, deferred)
    return result

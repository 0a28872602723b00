"""
Due-queue builder.

Selects the cards due on a civil day and orders them for a review session:
- FRAGILITY: least stable first (standard due reviews)
- RECENCY: most recently reviewed first (reinforcing fresh material)

Also hosts the smaller queues the study screens show next to it
(starred cards, cards struggled with today).
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from datetime import date, tzinfo
from typing import Optional

from srs_core.fsrs.constants import Rating, SortMode
from srs_core.fsrs.memory_state import ReviewState, Settings
from srs_core.session_builders.pool_utils import (
    civil_date,
    drop_orphans,
    fragility_key,
    recency_key,
    resolve_timezone,
)

logger = logging.getLogger(__name__)


def is_due(state: ReviewState, today: date, tz: tzinfo) -> bool:
    """Due when next_review_date falls on or before today in tz."""
    return civil_date(state.next_review_date, tz) <= today


def _due_states(
    states: Iterable[ReviewState],
    today: date,
    tz: Optional[tzinfo],
    known_vocabulary_ids: Optional[Collection[str]]
) -> list[ReviewState]:
    tz = resolve_timezone(tz)
    return [s for s in drop_orphans(states, known_vocabulary_ids) if is_due(s, today, tz)]


def build_due_queue(
    states: Iterable[ReviewState],
    settings: Settings,
    today: date,
    sort_mode: SortMode = SortMode.FRAGILITY,
    *,
    known_vocabulary_ids: Optional[Collection[str]] = None,
    tz: Optional[tzinfo] = None
) -> list[ReviewState]:
    """
    Build the ordered, capped list of cards due today.

    Args:
        states: Migrated review states
        settings: Provides max_reviews_per_day
        today: Civil day in the review timezone
        sort_mode: FRAGILITY or RECENCY
        known_vocabulary_ids: Ids with existing content; other states are
            skipped. None disables the check.
        tz: Review timezone (defaults to REVIEW_TIMEZONE)

    Returns:
        At most max_reviews_per_day states; the rest are left untouched
    """
    sort_mode = SortMode(sort_mode)
    due = _due_states(states, today, tz, known_vocabulary_ids)

    key = fragility_key if sort_mode == SortMode.FRAGILITY else recency_key
    due.sort(key=key)

    queue = due[:max(0, settings.max_reviews_per_day)]
    logger.debug(
        "Due queue for %s (%s): %d due, %d queued",
        today.isoformat(), sort_mode.value, len(due), len(queue)
    )
    return queue


def count_due(
    states: Iterable[ReviewState],
    settings: Settings,
    today: date,
    *,
    tz: Optional[tzinfo] = None
) -> int:
    """Number of due cards, capped at max_reviews_per_day."""
    due = _due_states(states, today, tz, None)
    return min(len(due), max(0, settings.max_reviews_per_day))


def get_starred(
    states: Iterable[ReviewState],
    known_vocabulary_ids: Optional[Collection[str]] = None
) -> list[ReviewState]:
    """Starred cards in input order."""
    return [s for s in drop_orphans(states, known_vocabulary_ids) if s.is_starred]


def get_difficult_today(
    states: Iterable[ReviewState],
    today: date,
    *,
    tz: Optional[tzinfo] = None,
    known_vocabulary_ids: Optional[Collection[str]] = None
) -> list[ReviewState]:
    """
    Cards rated Again or Hard today, Again first.

    A card's first Again/Hard rating of the day decides its group.
    """
    tz = resolve_timezone(tz)
    difficult: list[tuple[int, str, ReviewState]] = []
    for state in drop_orphans(states, known_vocabulary_ids):
        for entry in state.review_history:
            if entry.rating not in (Rating.AGAIN, Rating.HARD):
                continue
            if civil_date(entry.date, tz) == today:
                difficult.append((int(entry.rating), state.vocabulary_id, state))
                break
    difficult.sort(key=lambda item: (item[0], item[1]))
    return [state for _, _, state in difficult]

"""
Service layer to assemble the study overview.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, tzinfo
from typing import Optional

from srs_core.analytics.types import ReviewStats
from srs_core.fsrs.memory_state import ReviewState, Settings, VocabularyItem
from srs_core.session_builders.due_queue import (
    count_due,
    get_difficult_today,
    get_starred,
)
from srs_core.session_builders.pool_utils import drop_orphans, resolve_timezone


def build_review_stats(
    pool: Iterable[VocabularyItem],
    states: Iterable[ReviewState],
    settings: Settings,
    today: date,
    *,
    tz: Optional[tzinfo] = None
) -> ReviewStats:
    """
    Counts for the overview screen. States without content are ignored.
    """
    tz = resolve_timezone(tz)
    pool = list(pool)
    known_ids = {item.id for item in pool}
    states = drop_orphans(states, known_ids)
    scheduled_ids = {s.vocabulary_id for s in states}

    return ReviewStats(
        total_vocabularies=len(known_ids),
        with_review=len(scheduled_ids),
        without_review=len(known_ids - scheduled_ids),
        due_today=count_due(states, settings, today, tz=tz),
        starred_count=len(get_starred(states)),
        difficult_count=len(get_difficult_today(states, today, tz=tz)),
        new_cards_per_day=settings.new_cards_per_day,
        max_reviews_per_day=settings.max_reviews_per_day,
    )

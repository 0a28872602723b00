"""
New-card admission.

Brings vocabulary that has never been scheduled into the review pool,
oldest content first, capped by the daily new-card limit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from srs_core.fsrs.constants import DEFAULT_DIFFICULTY
from srs_core.fsrs.memory_state import (
    ReviewState,
    Settings,
    VocabularyItem,
    as_utc,
)

logger = logging.getLogger(__name__)


def _creation_key(item: VocabularyItem) -> tuple[int, float, str]:
    # Items without a creation time go last
    if item.created_at is None:
        return (1, 0.0, item.id)
    return (0, as_utc(item.created_at).timestamp(), item.id)


def new_review_state(item: VocabularyItem, now: datetime) -> ReviewState:
    """
    Fresh state for an admitted card: unrated and due immediately.
    """
    return ReviewState(
        vocabulary_id=item.id,
        owner_chat_id=item.owner_chat_id,
        stability=0.0,
        difficulty=DEFAULT_DIFFICULTY,
        current_interval_days=0,
        next_review_date=as_utc(now),
        last_review_date=None,
    )


def admit_new_cards(
    pool: Iterable[VocabularyItem],
    existing_states: Iterable[ReviewState],
    settings: Settings,
    now: datetime
) -> list[ReviewState]:
    """
    Create review states for the oldest unscheduled vocabulary.

    Args:
        pool: All vocabulary items
        existing_states: States that already exist (any variant)
        settings: Provides new_cards_per_day
        now: Admission timestamp; becomes each card's next_review_date

    Returns:
        At most new_cards_per_day new states, oldest content first
    """
    scheduled_ids = {state.vocabulary_id for state in existing_states}

    candidates: dict[str, VocabularyItem] = {}
    for item in pool:
        if item.id in scheduled_ids or item.id in candidates:
            continue
        candidates[item.id] = item

    ordered = sorted(candidates.values(), key=_creation_key)
    limit = max(0, settings.new_cards_per_day)
    admitted = [new_review_state(item, now) for item in ordered[:limit]]

    logger.info("Admitted %d of %d new cards", len(admitted), len(ordered))
    return admitted

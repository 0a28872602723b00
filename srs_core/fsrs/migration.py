"""
Legacy Migration - normalize older review records

Older records were written by a doubling-interval scheduler and carry only
correct/incorrect counts per review. This module estimates FSRS memory
state for them so everything downstream can assume a ReviewState.

Rating scales:
    The canonical scale is 4-level (Again=1, Hard=2, Good=3, Easy=4).
    Records written by the 3-level scheme (Again=1, Hard=2, Good=3) use the
    same numbers for the levels they share, so they map one-to-one.
    History entries with no usable rating keep rating=None and are judged
    by their incorrect_count.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from typing import Optional

from srs_core.fsrs.constants import D_MAX, D_MIN, Rating
from srs_core.fsrs.memory_state import (
    AnyReviewState,
    LegacyReviewState,
    ReviewHistoryEntry,
    ReviewState,
)

logger = logging.getLogger(__name__)

NEUTRAL_SUCCESS_RATE = 0.5  # Used when a record has no counts at all


def map_legacy_rating(value) -> Optional[Rating]:
    """
    Map a persisted rating from either historical scale to a Rating.

    Returns None for missing or unrecognized values instead of raising,
    so one odd history entry never blocks a whole record.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Rating):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return Rating(value) if 1 <= value <= 4 else None
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return map_legacy_rating(int(text))
        return Rating.__members__.get(text.upper())
    return None


def estimate_difficulty(history: Iterable[ReviewHistoryEntry]) -> float:
    """
    Difficulty from the aggregate success rate.

    100% -> 1.0, 50% -> 5.5, 0% -> 10.0 (linear, clamped).
    """
    correct = 0
    incorrect = 0
    for entry in history:
        correct += entry.correct_count
        incorrect += entry.incorrect_count
    total = correct + incorrect
    success_rate = correct / total if total > 0 else NEUTRAL_SUCCESS_RATE
    return max(D_MIN, min(D_MAX, 10.0 - success_rate * 9.0))


def count_lapses(history: Iterable[ReviewHistoryEntry]) -> int:
    """Number of history entries that recorded a failure."""
    return sum(1 for entry in history if entry.is_failure)


def migrate(state: AnyReviewState) -> ReviewState:
    """
    Turn any review record into a current ReviewState.

    A ReviewState is returned as-is, so migrate(migrate(x)) == migrate(x).

    Args:
        state: ReviewState or LegacyReviewState

    Returns:
        ReviewState with stability, difficulty and lapses populated
    """
    if isinstance(state, ReviewState):
        return state

    if state.stability is not None and state.difficulty is not None:
        stability = state.stability
        difficulty = max(D_MIN, min(D_MAX, state.difficulty))
        lapses = state.lapses if state.lapses is not None else count_lapses(state.review_history)
    else:
        stability = float(max(1, state.current_interval_days))
        difficulty = estimate_difficulty(state.review_history)
        lapses = count_lapses(state.review_history)
        logger.debug(
            "Migrated legacy record %s: S=%.1f D=%.2f lapses=%d",
            state.vocabulary_id, stability, difficulty, lapses
        )

    return ReviewState(
        vocabulary_id=state.vocabulary_id,
        owner_chat_id=state.owner_chat_id,
        stability=stability,
        difficulty=difficulty,
        current_interval_days=state.current_interval_days,
        next_review_date=state.next_review_date,
        last_review_date=state.last_review_date,
        review_history=state.review_history,
        lapses=lapses,
        is_starred=state.is_starred,
        card_direction=state.card_direction,
    )


def migrate_all(
    states: Iterable[AnyReviewState],
    known_vocabulary_ids: Optional[Collection[str]] = None
) -> list[ReviewState]:
    """
    Migrate a batch of records, skipping ones whose vocabulary was deleted.

    Args:
        states: Records of either variant
        known_vocabulary_ids: Ids that still have content; None disables
            the check

    Returns:
        Migrated states in input order, orphans dropped
    """
    migrated: list[ReviewState] = []
    skipped = 0
    for state in states:
        if known_vocabulary_ids is not None and state.vocabulary_id not in known_vocabulary_ids:
            skipped += 1
            logger.warning("Skipping review record for missing vocabulary %s", state.vocabulary_id)
            continue
        migrated.append(migrate(state))
    if skipped:
        logger.info("Migrated %d records, skipped %d orphans", len(migrated), skipped)
    return migrated

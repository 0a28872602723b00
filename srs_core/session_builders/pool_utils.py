"""
Pool utilities for session builders.

These helpers provide shared, minimal primitives for building and reasoning
about review pools without enforcing a single scheduling policy.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Collection, Iterable
from datetime import date, datetime, tzinfo
from typing import Optional, TypeVar

from srs_core import config
from srs_core.fsrs.memory_state import ReviewState, as_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")


def resolve_timezone(tz: Optional[tzinfo]) -> tzinfo:
    """Use the given zone, or the configured review timezone."""
    return tz if tz is not None else config.get_review_timezone()


def civil_date(value: datetime, tz: tzinfo) -> date:
    """
    Calendar day a timestamp falls on in the review timezone.
    """
    return as_utc(value).astimezone(tz).date()


def drop_orphans(
    states: Iterable[ReviewState],
    known_vocabulary_ids: Optional[Collection[str]]
) -> list[ReviewState]:
    """
    Remove states whose vocabulary no longer exists (None keeps everything).
    """
    if known_vocabulary_ids is None:
        return list(states)
    kept: list[ReviewState] = []
    for state in states:
        if state.vocabulary_id in known_vocabulary_ids:
            kept.append(state)
        else:
            logger.warning("Skipping review state for missing vocabulary %s", state.vocabulary_id)
    return kept


def fragility_key(state: ReviewState) -> tuple[float, str]:
    """Least stable first, ties by vocabulary id."""
    return (state.stability, state.vocabulary_id)


def recency_key(state: ReviewState) -> tuple[int, float, str]:
    """Most recently reviewed first, never-reviewed last, ties by vocabulary id."""
    if state.last_review_date is None:
        return (1, 0.0, state.vocabulary_id)
    return (0, -as_utc(state.last_review_date).timestamp(), state.vocabulary_id)


def shuffle_session(items: Iterable[T], rng: random.Random) -> list[T]:
    """
    Shuffle a session's order with an explicit random source.
    """
    shuffled = list(items)
    rng.shuffle(shuffled)
    return shuffled


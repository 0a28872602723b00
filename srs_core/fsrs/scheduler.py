"""
Scheduler - FSRS Algorithm Logic

Pure FSRS scheduling and state updates (no database calls, no clock reads).

Main workflow:
1. Load and migrate the review state (caller's responsibility)
2. Validate the rating
3. Calculate retrievability at the moment of rating
4. Apply the new-card, failure or success update
5. Derive the interval and append a history entry
6. Return a new ReviewState (caller persists it)

A Scheduler is a small value object built once per Settings; it carries
the desired retention and the random source used for interval jitter.
"""

from __future__ import annotations

import dataclasses
import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from srs_core.fsrs import updates
from srs_core.fsrs.constants import (
    DEFAULT_DIFFICULTY,
    RESET_INTERVAL_FLOOR,
    Rating,
)
from srs_core.fsrs.memory_state import (
    ReviewHistoryEntry,
    ReviewState,
    Settings,
    as_utc,
    calculate_retrievability,
    days_between,
)

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Applies ratings to review states for one set of settings.

    Args:
        settings: Scheduling settings (desired retention is read from here)
        rng: Random source for interval jitter. When omitted, each call seeds
            its own source from (vocabulary_id, now) so results are
            reproducible.
    """

    def __init__(self, settings: Settings, rng: Optional[random.Random] = None):
        self.settings = settings
        self.rng = rng

    @property
    def desired_retention(self) -> float:
        return self.settings.desired_retention

    def schedule(
        self,
        state: Optional[ReviewState],
        rating,
        now: datetime,
        *,
        vocabulary_id: Optional[str] = None,
        owner_chat_id: Optional[str] = None
    ) -> ReviewState:
        """
        Apply one rating and return the resulting state.

        Args:
            state: Current state, or None for a card that has no record yet
            rating: Again/Hard/Good/Easy (Rating, 1-4 or name)
            now: Review timestamp
            vocabulary_id: Required when state is None
            owner_chat_id: Used when state is None

        Returns:
            New ReviewState; the input is never modified

        Raises:
            InvalidRating: rating is not one of the four levels
        """
        rating = Rating.parse(rating)
        now = as_utc(now)

        if state is None:
            if vocabulary_id is None:
                raise ValueError("vocabulary_id is required when scheduling a card without state")
            state = ReviewState(
                vocabulary_id=vocabulary_id,
                owner_chat_id=owner_chat_id,
                stability=0.0,
                difficulty=DEFAULT_DIFFICULTY,
                current_interval_days=0,
                next_review_date=now,
                last_review_date=None,
            )

        if state.is_new:
            # Nothing has decayed before the first rating
            retrievability = 1.0
            new_stability = updates.initial_stability(rating)
            new_difficulty = updates.initial_difficulty(rating)
        else:
            elapsed = days_between(state.last_review_date, now)
            retrievability = calculate_retrievability(state.stability, elapsed)
            if rating == Rating.AGAIN:
                new_stability = updates.update_stability_on_failure(
                    state.stability, state.difficulty, retrievability
                )
            else:
                new_stability = updates.update_stability_on_success(
                    state.stability, state.difficulty, retrievability, rating
                )
            new_difficulty = updates.update_difficulty(state.difficulty, rating)

        interval = updates.next_interval(new_stability, self.desired_retention)
        interval = updates.apply_fuzz(interval, self._rng_for(state.vocabulary_id, now))

        entry = ReviewHistoryEntry(
            date=now,
            rating=rating,
            interval_before=state.current_interval_days,
            interval_after=interval,
            stability_before=state.stability,
            stability_after=new_stability,
            difficulty_before=state.difficulty,
            difficulty_after=new_difficulty,
            retrievability=retrievability,
            correct_count=1 if rating.is_success else 0,
            incorrect_count=0 if rating.is_success else 1,
        )

        lapses = state.lapses + (0 if rating.is_success else 1)

        logger.debug(
            "Scheduled %s: rating=%s R=%.3f S %.2f->%.2f D %.2f->%.2f interval=%dd",
            state.vocabulary_id, rating.name, retrievability,
            state.stability, new_stability, state.difficulty, new_difficulty, interval
        )

        return dataclasses.replace(
            state,
            stability=new_stability,
            difficulty=new_difficulty,
            current_interval_days=interval,
            last_review_date=now,
            next_review_date=now + timedelta(days=interval),
            review_history=state.review_history + (entry,),
            lapses=lapses,
        )

    def _rng_for(self, vocabulary_id: str, now: datetime) -> random.Random:
        if self.rng is not None:
            return self.rng
        return random.Random(f"{vocabulary_id}|{now.isoformat()}")


def schedule(
    state: Optional[ReviewState],
    rating,
    settings: Settings,
    now: datetime,
    *,
    rng: Optional[random.Random] = None,
    vocabulary_id: Optional[str] = None,
    owner_chat_id: Optional[str] = None
) -> ReviewState:
    """
    Process a rating and return the updated review state.

    Convenience wrapper around Scheduler for one-off calls.
    """
    return Scheduler(settings, rng=rng).schedule(
        state,
        rating,
        now,
        vocabulary_id=vocabulary_id,
        owner_chat_id=owner_chat_id,
    )


def reset_review_state(state: ReviewState, now: datetime) -> ReviewState:
    """
    Forget everything learned about a card and make it due again.

    History is kept; stability, difficulty and lapses go back to their
    admission values.
    """
    now = as_utc(now)
    next_review = now
    if state.last_review_date is not None and as_utc(state.last_review_date) > now:
        next_review = as_utc(state.last_review_date)
    return dataclasses.replace(
        state,
        stability=0.0,
        difficulty=DEFAULT_DIFFICULTY,
        lapses=0,
        current_interval_days=RESET_INTERVAL_FLOOR,
        next_review_date=next_review,
    )


def toggle_star(state: ReviewState) -> ReviewState:
    """Flip the starred flag."""
    return dataclasses.replace(state, is_starred=not state.is_starred)

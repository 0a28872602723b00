"""
Memory State - Review records and Retrievability

Defines the review record shapes and the derived recall probability.

Key concepts:
- Stability (S): Days until recall probability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t

Records come in two variants:
- LegacyReviewState: older records that may lack stability/difficulty/lapses
- ReviewState: the current shape, the only one the scheduler accepts

A LegacyReviewState becomes a ReviewState only through fsrs.migration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from srs_core.fsrs.constants import (
    DECAY,
    DEFAULT_MAX_REVIEWS_PER_DAY,
    DEFAULT_NEW_CARDS_PER_DAY,
    DEFAULT_RETENTION,
    FACTOR,
    RETENTION_MAX,
    RETENTION_MIN,
    Rating,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class VocabularyItem:
    """
    A vocabulary card's content. Owned by the content layer.
    """
    id: str
    front: str
    back: str
    usage_message_ids: tuple[str, ...] = ()
    owner_chat_id: Optional[str] = None  # Chat the word was collected from
    created_at: Optional[datetime] = None  # Drives FIFO admission


@dataclass(frozen=True)
class ReviewHistoryEntry:
    """
    One completed rating. Write-once.

    Entries converted from legacy records carry only the counts and
    intervals; the FSRS fields are None.
    """
    date: datetime
    rating: Optional[Rating]
    interval_before: int
    interval_after: int
    stability_before: Optional[float] = None
    stability_after: Optional[float] = None
    difficulty_before: Optional[float] = None
    difficulty_after: Optional[float] = None
    retrievability: Optional[float] = None
    correct_count: int = 0
    incorrect_count: int = 0

    @property
    def is_failure(self) -> bool:
        return self.rating == Rating.AGAIN or self.incorrect_count > 0


@dataclass(frozen=True)
class ReviewState:
    """
    Current scheduling state for one vocabulary card.

    stability == 0 means admitted but never rated (or explicitly reset).
    """
    vocabulary_id: str
    owner_chat_id: Optional[str]
    stability: float
    difficulty: float
    current_interval_days: int
    next_review_date: datetime
    last_review_date: Optional[datetime]
    review_history: tuple[ReviewHistoryEntry, ...] = ()
    lapses: int = 0
    is_starred: bool = False
    card_direction: Optional[str] = None  # Presentation hint only

    @property
    def is_new(self) -> bool:
        return self.stability <= 0


@dataclass(frozen=True)
class LegacyReviewState:
    """
    A persisted record written before stability/difficulty existed.
    """
    vocabulary_id: str
    owner_chat_id: Optional[str]
    current_interval_days: int
    next_review_date: datetime
    last_review_date: Optional[datetime]
    review_history: tuple[ReviewHistoryEntry, ...] = ()
    stability: Optional[float] = None
    difficulty: Optional[float] = None
    lapses: Optional[int] = None
    is_starred: bool = False
    card_direction: Optional[str] = None


AnyReviewState = Union[ReviewState, LegacyReviewState]


@dataclass(frozen=True)
class Settings:
    """
    User scheduling settings.

    desired_retention is clamped into [RETENTION_MIN, RETENTION_MAX] on
    construction; requested_retention keeps what the caller asked for.
    """
    desired_retention: float = DEFAULT_RETENTION
    max_reviews_per_day: int = DEFAULT_MAX_REVIEWS_PER_DAY
    new_cards_per_day: int = DEFAULT_NEW_CARDS_PER_DAY
    requested_retention: Optional[float] = field(default=None, compare=False)

    def __post_init__(self):
        requested = float(self.desired_retention)
        effective = max(RETENTION_MIN, min(RETENTION_MAX, requested))
        if effective != requested:
            logger.debug("Clamped desired retention %.3f -> %.3f", requested, effective)
        object.__setattr__(self, "requested_retention", requested)
        object.__setattr__(self, "desired_retention", effective)

    @property
    def retention_was_clamped(self) -> bool:
        return self.requested_retention != self.desired_retention


class CardPhase(str, Enum):
    """Conceptual lifecycle phase of a card."""
    NEW = "new"
    ACTIVE = "active"
    RELAPSED = "relapsed"


def card_phase(state: ReviewState) -> CardPhase:
    """
    New (no ratings yet), Relapsed (last rating was Again) or Active.
    """
    if not state.review_history:
        return CardPhase.NEW
    if state.review_history[-1].is_failure:
        return CardPhase.RELAPSED
    return CardPhase.ACTIVE


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Calculate retrievability using power-law decay.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    FACTOR is chosen so that R = 0.9 when t == S.

    Args:
        stability: Current stability in days
        elapsed_days: Days since the last review

    Returns:
        Retrievability between 0 and 1 (0 for unrated cards)
    """
    if stability <= 0:
        return 0.0
    if elapsed_days <= 0:
        return 1.0
    return (1.0 + FACTOR * elapsed_days / stability) ** DECAY


retrievability = calculate_retrievability


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_between(earlier: Optional[datetime], later: datetime) -> float:
    """
    Fractional days from earlier to later (0 when earlier is None or later).
    """
    if earlier is None:
        return 0.0
    delta = as_utc(later) - as_utc(earlier)
    return max(0.0, delta.total_seconds() / SECONDS_PER_DAY)

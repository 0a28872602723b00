"""
Types for review analytics.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewStats:
    """
    Counts shown on the study overview for one civil day.
    """
    total_vocabularies: int
    with_review: int
    without_review: int
    due_today: int  # Capped at max_reviews_per_day
    starred_count: int
    difficult_count: int  # Rated Again/Hard today
    new_cards_per_day: int
    max_reviews_per_day: int

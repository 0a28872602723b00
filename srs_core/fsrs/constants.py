"""
FSRS Constants and Parameters

All configurable parameters for the FSRS algorithm in one place.
Weights follow the published FSRS defaults; the per-rating tables are the
calibration used for a card's very first rating.
"""

from __future__ import annotations

from enum import Enum, IntEnum

from srs_core.fsrs.errors import InvalidRating


# ---- Ratings ----

class Rating(IntEnum):
    """User feedback on a recall attempt."""
    AGAIN = 1   # Forgot
    HARD = 2    # Recalled with high effort
    GOOD = 3    # Recalled normally
    EASY = 4    # Recalled fluently

    @classmethod
    def parse(cls, value) -> "Rating":
        """
        Coerce a rating value into a Rating.

        Accepts Rating members, the integers 1-4 and the names
        again/hard/good/easy (case-insensitive).

        Raises:
            InvalidRating: for anything else (including booleans)
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidRating(value)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidRating(value) from None
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise InvalidRating(value)

    @property
    def is_success(self) -> bool:
        return self is not Rating.AGAIN


class SortMode(str, Enum):
    """Ordering used by the due-queue builder."""
    FRAGILITY = "fragility"  # Ascending stability
    RECENCY = "recency"      # Most recently reviewed first


# ---- Forgetting curve ----

DECAY = -0.5
FACTOR = 0.9 ** (1 / DECAY) - 1  # 19/81, so that R(t=S) = 0.9


# ---- Bounds ----

S_MIN = 0.1              # Minimum stability (days) once rated
D_MIN = 1.0              # Minimum difficulty
D_MAX = 10.0             # Maximum difficulty
DEFAULT_DIFFICULTY = 5.0  # Neutral difficulty before the first rating

MAXIMUM_INTERVAL = 36500  # Days
RESET_INTERVAL_FLOOR = 0  # current_interval_days after an explicit reset


# ---- Settings bounds ----

RETENTION_MIN = 0.70
RETENTION_MAX = 0.97
DEFAULT_RETENTION = 0.9
DEFAULT_MAX_REVIEWS_PER_DAY = 50
DEFAULT_NEW_CARDS_PER_DAY = 20


# ---- Model weights ----
# W[0..3] seed INITIAL_STABILITY, W[4..5] seed INITIAL_DIFFICULTY.

W = (
    0.4072, 1.1829, 3.1262, 15.4722,
    7.2102, 0.5316, 1.0651, 0.0234,
    1.616, 0.1544, 1.0824, 1.9813,
    0.0953, 0.2975, 2.2042, 0.2407,
    2.9466,
)

HARD_PENALTY = W[15]  # Multiplier on stability growth for HARD
EASY_BONUS = W[16]    # Multiplier on stability growth for EASY


# ---- First-rating calibration ----

INITIAL_STABILITY = {
    Rating.AGAIN: W[0],
    Rating.HARD: W[1],
    Rating.GOOD: W[2],
    Rating.EASY: W[3],
}

INITIAL_DIFFICULTY = {
    Rating.AGAIN: 7.2102,
    Rating.HARD: 6.5086,
    Rating.GOOD: 5.3146,
    Rating.EASY: 3.2829,
}


# ---- Interval jitter ----

FUZZ_MIN_INTERVAL = 2    # Intervals at or below this are never jittered
FUZZ_RATIO = 0.05        # +/- 5%
FUZZ_MAX_DAYS = 2.0      # Never move more than 2 days either way

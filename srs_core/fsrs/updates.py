"""
Stability and Difficulty Updates

Implements the per-rating memory updates used by the scheduler.

Key principles:
- Surprising successes (low R) strengthen memory more than expected ones
- Forgetting resets stability to a short, recoverable value
- Difficulty reverts toward the neutral default so repeated identical
  ratings cannot push it to an extreme ("ease hell")
"""

from __future__ import annotations

import math
import random

from srs_core.fsrs.constants import (
    D_MAX,
    D_MIN,
    DEFAULT_DIFFICULTY,
    EASY_BONUS,
    FUZZ_MAX_DAYS,
    FUZZ_MIN_INTERVAL,
    FUZZ_RATIO,
    HARD_PENALTY,
    INITIAL_DIFFICULTY,
    INITIAL_STABILITY,
    MAXIMUM_INTERVAL,
    S_MIN,
    W,
    Rating,
)


def clamp_difficulty(difficulty: float) -> float:
    return max(D_MIN, min(D_MAX, difficulty))


def mean_reversion(difficulty: float) -> float:
    """
    Pull difficulty a fixed fraction of the way back to DEFAULT_DIFFICULTY.

    Formula:
        D'' = w7 * D_default + (1 - w7) * D'
    """
    return W[7] * DEFAULT_DIFFICULTY + (1.0 - W[7]) * difficulty


def initial_stability(rating: Rating) -> float:
    """Stability after a card's first rating (calibration table)."""
    return INITIAL_STABILITY[rating]


def initial_difficulty(rating: Rating) -> float:
    """Difficulty after a card's first rating (calibration table, mean-reverted)."""
    return clamp_difficulty(mean_reversion(INITIAL_DIFFICULTY[rating]))


def update_difficulty(difficulty: float, rating: Rating) -> float:
    """
    Update difficulty after a rating on an already-reviewed card.

    Formula:
        D' = D - w6 * (rating - 3)
        D'' = clip(mean_reversion(D'), 1, 10)

    Again/Hard raise difficulty, Easy lowers it, Good only reverts.

    Args:
        difficulty: Current difficulty
        rating: User rating

    Returns:
        New difficulty value (clipped to [1, 10])
    """
    delta = -W[6] * (int(rating) - 3)
    return clamp_difficulty(mean_reversion(difficulty + delta))


def update_stability_on_success(
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating
) -> float:
    """
    Update stability after a successful recall (Hard/Good/Easy).

    Formula:
        S' = S * (1 + e^w8 * (11 - D) * S^-w9 * (e^(w10 * (1 - R)) - 1) * m)

    Where m is HARD_PENALTY for Hard, EASY_BONUS for Easy and 1 for Good.
    With R < 1 every factor is positive, so S' > S.

    Args:
        stability: Current stability (S)
        difficulty: Current difficulty (D)
        retrievability: Recall probability at review time (R)
        rating: HARD, GOOD or EASY

    Returns:
        New stability value
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use update_stability_on_failure for AGAIN")

    modifier = 1.0
    if rating == Rating.HARD:
        modifier = HARD_PENALTY
    elif rating == Rating.EASY:
        modifier = EASY_BONUS

    growth = (
        math.exp(W[8])
        * (11.0 - difficulty)
        * stability ** -W[9]
        * (math.exp(W[10] * (1.0 - retrievability)) - 1.0)
        * modifier
    )
    return max(S_MIN, stability * (1.0 + growth))


def update_stability_on_failure(
    stability: float,
    difficulty: float,
    retrievability: float
) -> float:
    """
    Update stability after forgetting (Again).

    Formula:
        S' = w11 * D^w12 * ((S + 1)^w13 - 1) * e^(w14 * (1 - R))

    The result never exceeds the prior stability, so a lapse always
    shortens the next interval.

    Args:
        stability: Current stability
        difficulty: Current difficulty
        retrievability: Recall probability at review time

    Returns:
        New stability value (reduced)
    """
    new_stability = (
        W[11]
        * difficulty ** W[12]
        * ((stability + 1.0) ** W[13] - 1.0)
        * math.exp(W[14] * (1.0 - retrievability))
    )
    return max(S_MIN, min(new_stability, stability))


def next_interval(stability: float, desired_retention: float) -> int:
    """
    Days until retrievability falls to desired_retention.

    Formula:
        interval = round(9 * S * (1 / r - 1)), at least 1 day
    """
    interval = round(9.0 * stability * (1.0 / desired_retention - 1.0))
    return int(min(MAXIMUM_INTERVAL, max(1, interval)))


def apply_fuzz(interval: int, rng: random.Random) -> int:
    """
    Spread intervals over 2 days by up to 5% (at most 2 days) either way.
    """
    if interval <= FUZZ_MIN_INTERVAL:
        return interval
    spread = min(FUZZ_MAX_DAYS, interval * FUZZ_RATIO)
    fuzzed = round(interval + rng.uniform(-spread, spread))
    return int(min(MAXIMUM_INTERVAL, max(1, fuzzed)))

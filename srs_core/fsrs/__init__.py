"""
FSRS - Free Spaced Repetition Scheduler

Scheduling engine for vocabulary review cards.

This package implements:
- Power-law forgetting curve: R = (1 + FACTOR * t / S) ^ DECAY
- Rating-driven stability/difficulty updates (Again/Hard/Good/Easy)
- Migration of legacy records into the current state shape
- Optional SQLAlchemy persistence (srs_core.fsrs.database)

Quick start:
    from srs_core import fsrs

    settings = fsrs.Settings(desired_retention=0.9)
    state = fsrs.schedule(state, fsrs.Rating.GOOD, settings, now)

Everything here is pure except the database module; "now" is always
passed in by the caller.
"""

# Core scheduler API (algorithm logic)
from srs_core.fsrs.scheduler import (
    Scheduler,
    reset_review_state,
    schedule,
    toggle_star,
)

# Legacy migration
from srs_core.fsrs.migration import (
    map_legacy_rating,
    migrate,
    migrate_all,
)

# Constants and parameters
from srs_core.fsrs.constants import (
    D_MAX,
    D_MIN,
    DEFAULT_DIFFICULTY,
    INITIAL_DIFFICULTY,
    INITIAL_STABILITY,
    RETENTION_MAX,
    RETENTION_MIN,
    S_MIN,
    Rating,
    SortMode,
)
from srs_core.fsrs.errors import InvalidRating, SchedulingError

# Memory state
from srs_core.fsrs.memory_state import (
    AnyReviewState,
    CardPhase,
    LegacyReviewState,
    ReviewHistoryEntry,
    ReviewState,
    Settings,
    VocabularyItem,
    calculate_retrievability,
    card_phase,
    retrievability,
)


__all__ = [
    # Core algorithm
    "Scheduler",
    "schedule",
    "reset_review_state",
    "toggle_star",

    # Migration
    "migrate",
    "migrate_all",
    "map_legacy_rating",

    # Enums and errors
    "Rating",
    "SortMode",
    "InvalidRating",
    "SchedulingError",

    # Memory state
    "AnyReviewState",
    "CardPhase",
    "LegacyReviewState",
    "ReviewHistoryEntry",
    "ReviewState",
    "Settings",
    "VocabularyItem",
    "calculate_retrievability",
    "card_phase",
    "retrievability",

    # Parameters
    "D_MAX",
    "D_MIN",
    "DEFAULT_DIFFICULTY",
    "INITIAL_DIFFICULTY",
    "INITIAL_STABILITY",
    "RETENTION_MAX",
    "RETENTION_MIN",
    "S_MIN",
]

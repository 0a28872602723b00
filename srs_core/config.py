"""
Environment configuration.

Values come from the process environment, optionally seeded from a .env
file in the working directory.

Variables:
    DATABASE_URL         SQLAlchemy URL for the review store
    TEST_MODE            "true" to point DATABASE_URL at the test database
    REVIEW_TIMEZONE      IANA zone used for day boundaries (Asia/Ho_Chi_Minh)
    DESIRED_RETENTION    Target recall probability (0.9)
    MAX_REVIEWS_PER_DAY  Due-queue cap (50)
    NEW_CARDS_PER_DAY    Admission cap (20)
"""

from __future__ import annotations

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from srs_core.fsrs.constants import (
    DEFAULT_MAX_REVIEWS_PER_DAY,
    DEFAULT_NEW_CARDS_PER_DAY,
    DEFAULT_RETENTION,
)
from srs_core.fsrs.memory_state import Settings

load_dotenv()

DEFAULT_REVIEW_TIMEZONE = "Asia/Ho_Chi_Minh"


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_review_timezone() -> ZoneInfo:
    """
    Civil timezone used to decide which day a timestamp falls on.
    """
    name = os.getenv("REVIEW_TIMEZONE", DEFAULT_REVIEW_TIMEZONE)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"REVIEW_TIMEZONE is not a valid IANA zone: {name!r}") from exc


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def get_default_settings() -> Settings:
    """
    Build Settings from the environment.

    DESIRED_RETENTION outside [0.70, 0.97] is clamped by Settings.
    """
    return Settings(
        desired_retention=_get_float("DESIRED_RETENTION", DEFAULT_RETENTION),
        max_reviews_per_day=_get_int("MAX_REVIEWS_PER_DAY", DEFAULT_MAX_REVIEWS_PER_DAY),
        new_cards_per_day=_get_int("NEW_CARDS_PER_DAY", DEFAULT_NEW_CARDS_PER_DAY),
    )

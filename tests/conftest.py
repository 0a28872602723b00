"""
Shared fixtures for the scheduling engine tests.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from srs_core.fsrs.memory_state import ReviewState, Settings, VocabularyItem

VN = ZoneInfo("Asia/Ho_Chi_Minh")


@pytest.fixture
def now() -> datetime:
    # 09:00 in Ho Chi Minh City
    return datetime(2024, 3, 15, 2, 0, tzinfo=timezone.utc)


@pytest.fixture
def today(now):
    return now.astimezone(VN).date()


@pytest.fixture
def tz():
    return VN


@pytest.fixture
def settings() -> Settings:
    return Settings(desired_retention=0.9, max_reviews_per_day=50, new_cards_per_day=20)


@pytest.fixture
def make_state(now):
    """Factory for reviewed states with sensible defaults."""
    def _make(
        vocabulary_id: str = "v1",
        stability: float = 10.0,
        difficulty: float = 5.0,
        due: datetime | None = None,
        last: datetime | None = None,
        **kwargs,
    ) -> ReviewState:
        last_review = last if last is not None else now - timedelta(days=10)
        return ReviewState(
            vocabulary_id=vocabulary_id,
            owner_chat_id=kwargs.pop("owner_chat_id", "chat-1"),
            stability=stability,
            difficulty=difficulty,
            current_interval_days=kwargs.pop("current_interval_days", 10),
            next_review_date=due if due is not None else now,
            last_review_date=last_review,
            **kwargs,
        )
    return _make


@pytest.fixture
def make_item(now):
    """Factory for vocabulary items created `age_days` before now."""
    def _make(item_id: str, age_days: float = 0.0, **kwargs) -> VocabularyItem:
        return VocabularyItem(
            id=item_id,
            front=kwargs.pop("front", f"front-{item_id}"),
            back=kwargs.pop("back", f"back-{item_id}"),
            created_at=kwargs.pop("created_at", now - timedelta(days=age_days)),
            **kwargs,
        )
    return _make


@pytest.fixture
def database(tmp_path, monkeypatch):
    """Point DATABASE_URL at a fresh SQLite file and create the tables."""
    from srs_core.fsrs import database as db

    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'reviews.db'}")
    monkeypatch.setenv("TEST_MODE", "false")
    db.init_db()
    return db

from datetime import timedelta

import pandas as pd
import pytest

from srs_core.analytics import ReviewStats, build_review_stats, daily_retention, forecast_due_counts
from srs_core.fsrs import Rating, schedule


def test_forecast_counts_per_day(make_state, now, today, tz):
    states = [
        make_state("overdue", due=now - timedelta(days=4)),
        make_state("today", due=now),
        make_state("plus2", due=now + timedelta(days=2)),
        make_state("far", due=now + timedelta(days=30)),
    ]
    forecast = forecast_due_counts(states, today, 3, tz=tz)

    assert list(forecast.index) == list(pd.date_range(pd.Timestamp(today), periods=3, freq="D"))
    assert forecast.tolist() == [2, 0, 1]
    assert forecast.dtype == "int64"


def test_forecast_empty(today, tz):
    forecast = forecast_due_counts([], today, 5, tz=tz)
    assert forecast.tolist() == [0] * 5


def test_daily_retention(make_state, settings, now, tz):
    yesterday = now - timedelta(days=1)
    states = [
        schedule(make_state("a"), Rating.GOOD, settings, yesterday),
        schedule(make_state("b"), Rating.AGAIN, settings, yesterday),
        schedule(make_state("c"), Rating.EASY, settings, now),
    ]
    retention = daily_retention(states, tz=tz)

    assert retention.tolist() == pytest.approx([0.5, 1.0])
    assert retention.index[0] < retention.index[1]


def test_daily_retention_without_history(make_state, tz):
    assert daily_retention([make_state()], tz=tz).empty


def test_review_stats(make_item, make_state, settings, now, today, tz):
    pool = [make_item(f"v{i}") for i in range(5)]
    states = [
        make_state("v0", is_starred=True),
        make_state("v1", due=now + timedelta(days=3)),
        schedule(make_state("v2"), Rating.AGAIN, settings, now),
        make_state("orphan"),
    ]
    stats = build_review_stats(pool, states, settings, today, tz=tz)

    assert stats == ReviewStats(
        total_vocabularies=5,
        with_review=3,
        without_review=2,
        due_today=1,
        starred_count=1,
        difficult_count=1,
        new_cards_per_day=20,
        max_reviews_per_day=50,
    )

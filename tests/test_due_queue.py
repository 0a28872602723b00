import dataclasses
import random
from datetime import datetime, timedelta, timezone

import pytest

from srs_core.fsrs import Rating, Settings, SortMode, schedule
from srs_core.session_builders import (
    build_due_queue,
    count_due,
    get_difficult_today,
    get_starred,
    is_due,
    shuffle_session,
)


def test_sixty_due_capped_at_fifty_by_fragility(make_state, settings, now, today, tz):
    states = [make_state(f"v{i:02d}", stability=float(60 - i)) for i in range(60)]
    queue = build_due_queue(states, settings, today, SortMode.FRAGILITY, tz=tz)

    assert len(queue) == 50
    stabilities = [s.stability for s in queue]
    assert stabilities == sorted(stabilities)
    # The ten most stable are left out
    assert min(s.stability for s in states if s not in queue) > max(stabilities)


def test_recency_orders_by_last_review_desc(make_state, settings, now, today, tz):
    states = [
        make_state("old", last=now - timedelta(days=9)),
        make_state("new", last=now - timedelta(hours=1)),
        dataclasses.replace(make_state("never"), last_review_date=None),
        make_state("mid", last=now - timedelta(days=2)),
    ]
    queue = build_due_queue(states, settings, today, SortMode.RECENCY, tz=tz)
    assert [s.vocabulary_id for s in queue] == ["new", "mid", "old", "never"]


def test_ties_break_by_vocabulary_id(make_state, settings, today, tz):
    states = [make_state(vid, stability=3.0) for vid in ("c", "a", "b")]
    for mode in SortMode:
        queue = build_due_queue(states, settings, today, mode, tz=tz)
        assert [s.vocabulary_id for s in queue] == ["a", "b", "c"]


def test_future_cards_are_excluded(make_state, settings, now, today, tz):
    states = [
        make_state("due", due=now - timedelta(days=3)),
        make_state("tomorrow", due=now + timedelta(days=1)),
    ]
    assert [s.vocabulary_id for s in build_due_queue(states, settings, today, tz=tz)] == ["due"]


def test_due_uses_review_timezone_day(make_state, settings, tz):
    # 20:00 UTC on March 15 is already March 16 in Ho Chi Minh City
    due_at = datetime(2024, 3, 15, 20, 0, tzinfo=timezone.utc)
    state = make_state(due=due_at)

    assert not is_due(state, due_at.date(), tz)
    assert is_due(state, due_at.date() + timedelta(days=1), tz)
    assert is_due(state, due_at.date(), timezone.utc)


def test_late_evening_cards_are_due_the_same_day(make_state, settings, tz):
    # 23:30 local time is still "today"
    due_at = datetime(2024, 3, 15, 16, 30, tzinfo=timezone.utc)
    assert is_due(make_state(due=due_at), datetime(2024, 3, 15).date(), tz)


def test_orphans_are_skipped(make_state, settings, today, tz):
    states = [make_state("kept"), make_state("deleted")]
    queue = build_due_queue(states, settings, today, known_vocabulary_ids={"kept"}, tz=tz)
    assert [s.vocabulary_id for s in queue] == ["kept"]


def test_string_sort_mode_accepted(make_state, settings, today, tz):
    assert build_due_queue([make_state()], settings, today, "recency", tz=tz)
    with pytest.raises(ValueError):
        build_due_queue([make_state()], settings, today, "alphabetical", tz=tz)


def test_count_due_is_capped(make_state, today, tz):
    states = [make_state(f"v{i}") for i in range(8)]
    assert count_due(states, Settings(max_reviews_per_day=5), today, tz=tz) == 5
    assert count_due(states, Settings(max_reviews_per_day=50), today, tz=tz) == 8


def test_starred(make_state):
    states = [make_state("a", is_starred=True), make_state("b"), make_state("c", is_starred=True)]
    assert [s.vocabulary_id for s in get_starred(states)] == ["a", "c"]
    assert [s.vocabulary_id for s in get_starred(states, {"c"})] == ["c"]


def test_difficult_today_puts_again_first(make_state, settings, now, today, tz):
    hard = schedule(make_state("hard"), Rating.HARD, settings, now)
    again = schedule(make_state("again"), Rating.AGAIN, settings, now)
    good = schedule(make_state("good"), Rating.GOOD, settings, now)
    yesterday = schedule(make_state("old"), Rating.AGAIN, settings, now - timedelta(days=1))

    result = get_difficult_today([hard, good, again, yesterday], today, tz=tz)
    assert [s.vocabulary_id for s in result] == ["again", "hard"]


def test_shuffle_session_is_reproducible(make_state):
    queue = [make_state(f"v{i}") for i in range(10)]
    first = shuffle_session(queue, random.Random(3))
    second = shuffle_session(queue, random.Random(3))
    assert first == second
    assert sorted(s.vocabulary_id for s in first) == sorted(s.vocabulary_id for s in queue)
    assert [s.vocabulary_id for s in queue] == [f"v{i}" for i in range(10)]

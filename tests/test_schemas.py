from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from srs_core.fsrs import LegacyReviewState, Rating, ReviewState, migrate, schedule
from srs_core.schemas import (
    dump_review_state,
    dump_settings,
    load_review_states,
    parse_review_record,
    parse_settings,
    parse_vocabulary_record,
)

LEGACY_RECORD = {
    "vocabularyId": "voc-1",
    "dailyChatId": "2024-02-01",
    "currentIntervalDays": 6,
    "nextReviewDate": "2024-03-15T00:00:00Z",
    "lastReviewDate": "2024-03-09T00:00:00Z",
    "reviewHistory": [
        {"date": "2024-03-02T00:00:00Z", "correctCount": 1, "incorrectCount": 1,
         "intervalBefore": 0, "intervalAfter": 1},
        {"date": "2024-03-09T00:00:00Z", "correctCount": 2, "incorrectCount": 0,
         "intervalBefore": 1, "intervalAfter": 6},
    ],
}


def test_legacy_record_parses_to_legacy_variant():
    state = parse_review_record(LEGACY_RECORD)
    assert isinstance(state, LegacyReviewState)
    assert state.owner_chat_id == "2024-02-01"
    assert state.review_history[0].rating is None


def test_legacy_record_migrates_and_schedules(settings):
    [state] = load_review_states([LEGACY_RECORD])
    assert isinstance(state, ReviewState)
    assert state.stability == 6.0
    assert state.difficulty == pytest.approx(10 - 9 * 0.75)
    assert state.lapses == 1

    updated = schedule(state, Rating.GOOD, settings, datetime(2024, 3, 15, tzinfo=timezone.utc))
    assert updated.review_history[-1].rating is Rating.GOOD


def test_current_record_parses_to_review_state():
    record = dict(LEGACY_RECORD, stability=4.5, difficulty=6.2, lapses=0, isStarred=True)
    state = parse_review_record(record)
    assert isinstance(state, ReviewState)
    assert migrate(state) is state
    assert state.is_starred is True


def test_partial_fsrs_record_is_legacy():
    record = dict(LEGACY_RECORD, stability=4.5)
    assert isinstance(parse_review_record(record), LegacyReviewState)


def test_orphan_records_are_skipped():
    other = dict(LEGACY_RECORD, vocabularyId="voc-gone")
    states = load_review_states([LEGACY_RECORD, other], known_vocabulary_ids={"voc-1"})
    assert [s.vocabulary_id for s in states] == ["voc-1"]


def test_dump_uses_camel_case_and_iso_dates(make_state):
    state = make_state(owner_chat_id="chat-7")
    data = dump_review_state(state)

    assert data["vocabularyId"] == "v1"
    assert data["ownerChatId"] == "chat-7"
    assert data["nextReviewDate"].startswith("2024-03-15T02:00:00")
    assert data["stability"] == 10.0
    assert data["lapses"] == 0


def test_dumped_state_loads_back_unchanged(make_state, settings, now):
    state = schedule(make_state(), Rating.HARD, settings, now)
    [loaded] = load_review_states([dump_review_state(state)])
    assert loaded == state


def test_malformed_record_raises():
    with pytest.raises(ValidationError):
        parse_review_record({"vocabularyId": "x"})
    with pytest.raises(ValidationError):
        parse_review_record(dict(LEGACY_RECORD, currentIntervalDays=-1))


def test_vocabulary_record_accepts_old_field_names():
    item = parse_vocabulary_record({
        "id": "voc-1",
        "korean": "사과",
        "vietnamese": "quả táo",
        "createdDate": "2024-01-01T00:00:00Z",
        "usageMessageIds": ["m1"],
    })
    assert item.front == "사과"
    assert item.back == "quả táo"
    assert item.usage_message_ids == ("m1",)
    assert item.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_settings_defaults_and_clamp():
    settings = parse_settings({})
    assert settings.desired_retention == 0.9
    assert settings.max_reviews_per_day == 50
    assert settings.new_cards_per_day == 20

    clamped = parse_settings({"desiredRetention": 0.99})
    assert clamped.desired_retention == 0.97
    assert clamped.retention_was_clamped
    assert dump_settings(clamped)["desiredRetention"] == 0.97


def test_out_of_range_difficulty_is_clamped(settings):
    record = dict(
        LEGACY_RECORD,
        stability=10.0,
        difficulty=40.0,
        lapses=0,
        lastReviewDate="2024-03-05T00:00:00Z",
    )
    [state] = load_review_states([record])
    assert state.difficulty == 10.0

    updated = schedule(state, Rating.GOOD, settings, datetime(2024, 3, 15, tzinfo=timezone.utc))
    assert updated.stability >= 10.0

"""
Pydantic models for persisted review records.

These models define the JSON shape the application stores (camelCase keys,
ISO-8601 dates) and convert it to and from the engine's dataclasses.
This is the data-access boundary: records are parsed into either a
LegacyReviewState or a ReviewState here and migrated once, so nothing
downstream checks for missing fields again.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from srs_core.fsrs.memory_state import (
    AnyReviewState,
    LegacyReviewState,
    ReviewHistoryEntry,
    ReviewState,
    Settings,
    VocabularyItem,
)
from srs_core.fsrs.constants import (
    DEFAULT_MAX_REVIEWS_PER_DAY,
    DEFAULT_NEW_CARDS_PER_DAY,
    DEFAULT_RETENTION,
)
from srs_core.fsrs.migration import map_legacy_rating, migrate_all
from srs_core.fsrs.updates import clamp_difficulty


class RecordModel(BaseModel):
    """Base for camelCase records."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ReviewHistoryRecord(RecordModel):
    """One entry of a record's reviewHistory."""
    date: datetime
    rating: Optional[Any] = None  # 1-4, a rating name, or absent on legacy entries
    correct_count: int = Field(default=0, ge=0)
    incorrect_count: int = Field(default=0, ge=0)
    interval_before: int = Field(default=0, ge=0)
    interval_after: int = Field(default=0, ge=0)
    stability_before: Optional[float] = None
    stability_after: Optional[float] = None
    difficulty_before: Optional[float] = None
    difficulty_after: Optional[float] = None
    retrievability: Optional[float] = None

    def to_entry(self) -> ReviewHistoryEntry:
        return ReviewHistoryEntry(
            date=self.date,
            rating=map_legacy_rating(self.rating),
            interval_before=self.interval_before,
            interval_after=self.interval_after,
            stability_before=self.stability_before,
            stability_after=self.stability_after,
            difficulty_before=self.difficulty_before,
            difficulty_after=self.difficulty_after,
            retrievability=self.retrievability,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
        )

    @classmethod
    def from_entry(cls, entry: ReviewHistoryEntry) -> "ReviewHistoryRecord":
        return cls(
            date=entry.date,
            rating=int(entry.rating) if entry.rating is not None else None,
            correct_count=entry.correct_count,
            incorrect_count=entry.incorrect_count,
            interval_before=entry.interval_before,
            interval_after=entry.interval_after,
            stability_before=entry.stability_before,
            stability_after=entry.stability_after,
            difficulty_before=entry.difficulty_before,
            difficulty_after=entry.difficulty_after,
            retrievability=entry.retrievability,
        )


class ReviewRecord(RecordModel):
    """
    A persisted review schedule for one vocabulary item.

    stability/difficulty/lapses are missing on records written before FSRS.
    Older records name the owner field dailyChatId.
    """
    vocabulary_id: str
    owner_chat_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ownerChatId", "dailyChatId", "owner_chat_id"),
        serialization_alias="ownerChatId",
    )
    current_interval_days: int = Field(default=0, ge=0)
    next_review_date: datetime
    last_review_date: Optional[datetime] = None
    review_history: list[ReviewHistoryRecord] = Field(default_factory=list)
    stability: Optional[float] = Field(default=None, ge=0)
    difficulty: Optional[float] = None
    lapses: Optional[int] = Field(default=None, ge=0)
    is_starred: bool = False
    card_direction: Optional[str] = None

    @field_validator("difficulty")
    @classmethod
    def _clamp_difficulty(cls, value: Optional[float]) -> Optional[float]:
        # Stored values outside [1, 10] are pulled back into range
        return clamp_difficulty(value) if value is not None else None

    @property
    def is_current(self) -> bool:
        return (
            self.stability is not None
            and self.difficulty is not None
            and self.lapses is not None
        )

    def to_state(self) -> AnyReviewState:
        """Current records become ReviewState, everything else LegacyReviewState."""
        history = tuple(record.to_entry() for record in self.review_history)
        common = dict(
            vocabulary_id=self.vocabulary_id,
            owner_chat_id=self.owner_chat_id,
            current_interval_days=self.current_interval_days,
            next_review_date=self.next_review_date,
            last_review_date=self.last_review_date,
            review_history=history,
            is_starred=self.is_starred,
            card_direction=self.card_direction,
        )
        if self.is_current:
            return ReviewState(
                stability=self.stability,
                difficulty=self.difficulty,
                lapses=self.lapses,
                **common,
            )
        return LegacyReviewState(
            stability=self.stability,
            difficulty=self.difficulty,
            lapses=self.lapses,
            **common,
        )

    @classmethod
    def from_state(cls, state: ReviewState) -> "ReviewRecord":
        return cls(
            vocabulary_id=state.vocabulary_id,
            owner_chat_id=state.owner_chat_id,
            current_interval_days=state.current_interval_days,
            next_review_date=state.next_review_date,
            last_review_date=state.last_review_date,
            review_history=[ReviewHistoryRecord.from_entry(e) for e in state.review_history],
            stability=state.stability,
            difficulty=state.difficulty,
            lapses=state.lapses,
            is_starred=state.is_starred,
            card_direction=state.card_direction,
        )


class VocabularyRecord(RecordModel):
    """A stored vocabulary item (older records use korean/vietnamese)."""
    id: str
    front: str = Field(validation_alias=AliasChoices("front", "korean"), serialization_alias="front")
    back: str = Field(validation_alias=AliasChoices("back", "vietnamese"), serialization_alias="back")
    usage_message_ids: list[str] = Field(default_factory=list)
    owner_chat_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("ownerChatId", "dailyChatId", "owner_chat_id"),
        serialization_alias="ownerChatId",
    )
    created_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("createdAt", "createdDate", "created_at"),
        serialization_alias="createdAt",
    )

    def to_item(self) -> VocabularyItem:
        return VocabularyItem(
            id=self.id,
            front=self.front,
            back=self.back,
            usage_message_ids=tuple(self.usage_message_ids),
            owner_chat_id=self.owner_chat_id,
            created_at=self.created_at,
        )


class SettingsRecord(RecordModel):
    """User scheduling settings as stored."""
    desired_retention: float = DEFAULT_RETENTION
    max_reviews_per_day: int = Field(default=DEFAULT_MAX_REVIEWS_PER_DAY, ge=0)
    new_cards_per_day: int = Field(default=DEFAULT_NEW_CARDS_PER_DAY, ge=0)

    def to_settings(self) -> Settings:
        return Settings(
            desired_retention=self.desired_retention,
            max_reviews_per_day=self.max_reviews_per_day,
            new_cards_per_day=self.new_cards_per_day,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SettingsRecord":
        return cls(
            desired_retention=settings.desired_retention,
            max_reviews_per_day=settings.max_reviews_per_day,
            new_cards_per_day=settings.new_cards_per_day,
        )


# ---- Boundary helpers ----

def parse_review_record(data: dict) -> AnyReviewState:
    """
    Parse one stored record into its tagged variant (not yet migrated).

    Raises:
        pydantic.ValidationError: if the record is malformed
    """
    return ReviewRecord.model_validate(data).to_state()


def load_review_states(
    records: Iterable[dict],
    known_vocabulary_ids: Optional[Collection[str]] = None
) -> list[ReviewState]:
    """
    Parse and migrate stored records, skipping ones whose vocabulary is gone.
    """
    return migrate_all(
        (parse_review_record(data) for data in records),
        known_vocabulary_ids,
    )


def dump_review_state(state: ReviewState) -> dict:
    """Serialize a state to its stored JSON shape."""
    return ReviewRecord.from_state(state).model_dump(by_alias=True, mode="json")


def parse_vocabulary_record(data: dict) -> VocabularyItem:
    return VocabularyRecord.model_validate(data).to_item()


def parse_settings(data: dict) -> Settings:
    """Stored settings -> Settings (retention is clamped, not rejected)."""
    return SettingsRecord.model_validate(data).to_settings()


def dump_settings(settings: Settings) -> dict:
    """Serialize the effective settings."""
    return SettingsRecord.from_settings(settings).model_dump(by_alias=True, mode="json")

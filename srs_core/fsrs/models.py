"""
SQLAlchemy ORM Models for the review store

Defines ReviewStateRow and ReviewHistoryRow for persistence.
stability/difficulty/lapses are nullable so rows imported from the
pre-FSRS store can be loaded and migrated.
"""

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReviewStateRow(Base):
    """
    Persistent scheduling state for a single vocabulary card.
    """
    __tablename__ = 'review_state'

    vocabulary_id = Column(String(255), primary_key=True, nullable=False)
    owner_chat_id = Column(String(255), nullable=True)  # Chat the word came from

    # Memory model (NULL on unmigrated rows)
    stability = Column(Float, nullable=True)
    difficulty = Column(Float, nullable=True)
    lapses = Column(Integer, nullable=True)

    # Schedule
    current_interval_days = Column(Integer, nullable=False, default=0)
    next_review_date = Column(DateTime(timezone=True), nullable=False)
    last_review_date = Column(DateTime(timezone=True), nullable=True)

    # Presentation
    is_starred = Column(Boolean, nullable=False, default=False)
    card_direction = Column(String(50), nullable=True)

    def __repr__(self):
        return f"<ReviewStateRow({self.vocabulary_id}, S={self.stability}, D={self.difficulty})>"


class ReviewHistoryRow(Base):
    """
    One completed rating of a card. Rows are only ever appended.
    """
    __tablename__ = 'review_history'

    id = Column(Integer, primary_key=True, autoincrement=True)
    vocabulary_id = Column(String(255), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # 0-based index within the card's history

    date = Column(DateTime(timezone=True), nullable=False)
    rating = Column(Integer, nullable=True)  # 1=AGAIN, 2=HARD, 3=GOOD, 4=EASY
    correct_count = Column(Integer, nullable=False, default=0)
    incorrect_count = Column(Integer, nullable=False, default=0)

    interval_before = Column(Integer, nullable=False, default=0)
    interval_after = Column(Integer, nullable=False, default=0)
    stability_before = Column(Float, nullable=True)
    stability_after = Column(Float, nullable=True)
    difficulty_before = Column(Float, nullable=True)
    difficulty_after = Column(Float, nullable=True)
    retrievability = Column(Float, nullable=True)

    def __repr__(self):
        return f"<ReviewHistoryRow(id={self.id}, {self.vocabulary_id}#{self.position}, rating={self.rating})>"

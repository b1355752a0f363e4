"""
Solace Backend — Advice Feedback SQLAlchemy Model
==================================================

What:  ORM model for `advice_feedback`: a user's rating of the advice
       generated for one of their problems.
Who:   FeedbackService (submitFeedback mutation).

Table Design Rationale:
    - One row per (problem, user): resubmitting feedback updates the row
      instead of adding another (uq_advice_feedback_problem_user)
    - rating is constrained to 1..5 in the database as well as in the
      input schema
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from solace.database import Base


class AdviceFeedback(Base):
    __tablename__ = "advice_feedback"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    problem_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("problems.id", ondelete="CASCADE"),
        nullable=False,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    feedback_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_helpful: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("problem_id", "user_id", name="uq_advice_feedback_problem_user"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_advice_feedback_rating_range"),
    )

    def __repr__(self) -> str:
        return (
            f"<AdviceFeedback(id={self.id}, problem_id={self.problem_id}, "
            f"rating={self.rating})>"
        )

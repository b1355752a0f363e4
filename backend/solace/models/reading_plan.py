"""
Solace Backend — Reading Plan SQLAlchemy Models
================================================

What:  ORM models for `reading_plans` and `reading_plan_items`.
Why:   A reading plan is an ordered sequence of verses attached to one
       problem; each item tracks whether the user has read its verse.
Who:   ReadingPlanService (assembly and the mark-as-read mutation).

Rows are produced by an external planning process. The API only reads them
and flips `is_read` on items.

Query Patterns:
    - Plan of a problem: WHERE problem_id = :uuid (unique index)
    - Items of a plan: WHERE reading_plan_id = :uuid ORDER BY item_order
      → uq_reading_plan_items_order doubles as the ordering index
    - Mark as read: WHERE reading_plan_id = :plan AND verse_id = :verse
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
    UniqueConstraint,
    Uuid,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column

from solace.database import Base


class ReadingPlan(Base):
    """At most one plan per problem (enforced by the unique problem_id)."""

    __tablename__ = "reading_plans"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    problem_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("problems.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<ReadingPlan(id={self.id}, problem_id={self.problem_id})>"


class ReadingPlanItem(Base):
    """
    One verse entry within a plan.

    item_order is positive and unique within a plan; it defines the display
    sequence but is not guaranteed to be contiguous from 1.
    """

    __tablename__ = "reading_plan_items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    reading_plan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("reading_plans.id", ondelete="CASCADE"),
        nullable=False,
    )

    verse_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("verses.id"),
        nullable=False,
    )

    item_order: Mapped[int] = mapped_column(Integer, nullable=False)

    is_read: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

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
        UniqueConstraint("reading_plan_id", "item_order", name="uq_reading_plan_items_order"),
        CheckConstraint("item_order > 0", name="ck_reading_plan_items_order_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<ReadingPlanItem(id={self.id}, reading_plan_id={self.reading_plan_id}, "
            f"item_order={self.item_order}, is_read={self.is_read})>"
        )

"""
Solace Backend — Problem SQLAlchemy Model
==========================================

What:  ORM model representing the `problems` table.
Why:   A problem is a user-submitted description of a personal difficulty;
       advice text is attached once the advice generator succeeds.

Query Patterns:
    - Get single problem: SELECT ... WHERE id = :uuid (primary key)
    - Problems of a user: SELECT ... WHERE user_id = :uuid ORDER BY created_at
      → idx_problems_user_created
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from solace.database import Base


class Problem(Base):
    """
    Lifecycle:
        1. Created by the createProblem mutation (advice is NULL)
        2. generate_advice() fills `advice` and bumps `updated_at`
    """

    __tablename__ = "problems"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Free-form situation details ("work", "family") and a coarse category
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # NULL until the advice generator has produced text for this problem
    advice: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_problems_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Problem(id={self.id}, user_id={self.user_id}, title='{self.title}')>"

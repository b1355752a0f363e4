"""
Solace Backend — Verse SQLAlchemy Model
========================================

What:  ORM model for the pre-seeded, read-only `verses` reference table.
"""

import uuid

from sqlalchemy import CheckConstraint, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from solace.database import Base


class Verse(Base):
    """One Bible verse citation (book, chapter, verse) and its text."""

    __tablename__ = "verses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    book: Mapped[str] = mapped_column(String(50), nullable=False)
    chapter: Mapped[int] = mapped_column(Integer, nullable=False)
    verse: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("chapter > 0", name="ck_verses_chapter_positive"),
        CheckConstraint("verse > 0", name="ck_verses_verse_positive"),
    )

    @property
    def citation(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"

    def __repr__(self) -> str:
        return f"<Verse(id={self.id}, citation='{self.citation}')>"

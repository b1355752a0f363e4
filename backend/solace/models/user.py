"""
Solace Backend — User SQLAlchemy Model
=======================================

What:  ORM model representing the `users` table.
Who:   UserService (create, read) and ProblemService (owner check).

Table Design Rationale:
    - UUID primary key generated in Python so the created record can be
      returned without a refresh round-trip
    - username and email carry UNIQUE constraints; UserService translates a
      violation into ConflictError
    - password_hash stores a passlib hash, never the raw credential
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from solace.database import Base


class User(Base):
    """An account that owns zero or more problems."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

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
        return f"<User(id={self.id}, username='{self.username}')>"

"""
Jotter Backend — Note SQLAlchemy Model
=======================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteStore only; services and routes see it through the store.

Table Design Rationale:
    - UUID primary key generated in Python: works the same on PostgreSQL
      and SQLite, and ids are not guessable.
    - user_id: owner reference, set once at insert and never updated.
    - created_at: gives the list endpoint a stable insertion order.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from jotter.database import Base


class Note(Base):
    """
    A short text note with an importance flag and one owner.

    Lifecycle:
        1. Inserted by an authenticated POST (owner taken from the token)
        2. content/important replaced by PUT
        3. Hard-deleted by DELETE (no soft-delete)
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Why TEXT: no length limit on note content; emptiness is checked in the service
    content: Mapped[str] = mapped_column(Text, nullable=False)

    important: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
        Index("idx_notes_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, important={self.important}, user_id={self.user_id})>"

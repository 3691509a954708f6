"""
Jotter Backend — User SQLAlchemy Model
=======================================

What:  ORM model representing the `users` table.

Why note_ids is a JSON column (not a relationship):
    A user keeps an ordered list of the notes they created, appended on
    every note creation. The list is written explicitly by UserStore and
    read back by an explicit batch join; nothing relies on ORM lazy loading.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from jotter.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Unique constraint backs the store's pre-insert check under concurrency
    username: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    # Note ids as strings, in creation order
    note_ids: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # Registration order; GET /api/users lists users by it
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        # password_hash deliberately left out
        return f"<User(id={self.id}, username='{self.username}')>"

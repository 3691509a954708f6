"""
Jotter Backend — Note Request/Response Schemas
===============================================

What:  Pydantic models defining the notes API contract.
Why:   Request bodies are validated before a route runs, so a POST without
       content is rejected (400) before any token check or write happens.
How:   Responses are built explicitly by NoteService from ORM rows; the
       `owner` field is the user id, or an embedded summary in the list.

Design Decision:
    Schemas are separate from SQLAlchemy models so the API never exposes
    internal columns (created_at, the raw FK name) and the list endpoint can
    embed owner data produced by an explicit join.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    `important` is optional; a missing or falsy value stores false.
    """
    content: str = Field(min_length=1, description="Note text (required, non-empty)")
    important: Optional[bool] = Field(default=None, description="Importance flag (default false)")


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes/{id}. Only the fields the client sends are applied.
    """
    content: Optional[str] = Field(default=None, min_length=1, description="Replacement text")
    important: Optional[bool] = Field(default=None, description="Replacement importance flag")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """A single note; `owner` is the owning user's id."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    content: str
    important: bool
    owner: uuid.UUID = Field(description="Id of the user who created the note")


class OwnerSummary(BaseModel):
    """Owner fields embedded into each item of GET /api/notes."""
    id: uuid.UUID
    username: str
    name: Optional[str] = None


class NoteWithOwnerResponse(BaseModel):
    """
    Item of GET /api/notes.

    owner is null only if the owning user row has disappeared.
    """
    id: uuid.UUID
    content: str
    important: bool
    owner: Optional[OwnerSummary] = None


class NoteSummary(BaseModel):
    """Note fields embedded into each user of GET /api/users."""
    id: uuid.UUID
    content: str
    important: bool

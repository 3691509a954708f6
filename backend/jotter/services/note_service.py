"""
Jotter Backend — Note Service
==============================

What:  Business rules for the notes resource: listing with owners,
       lookup, authenticated creation, update and delete.
Why:   Keeps routes free of anything but HTTP details.
How:   Each call receives the request's AsyncSession and builds the stores
       it needs; the service itself holds no state.

Create flow (POST /api/notes):
    ┌──────────┐   ┌──────────────┐   ┌──────────────┐   ┌───────────────┐
    │  Body    │──▶│ Bearer token │──▶│ Insert note  │──▶│ Append note id│
    │ (schema) │   │ → user       │   │ (NoteStore)  │   │ to owner      │
    └──────────┘   └──────────────┘   └──────────────┘   └───────────────┘

    Any failing step raises and nothing after it runs. Both writes share
    the request session, so they commit together or not at all.

Owner join (GET /api/notes):
    1. SELECT all notes
    2. SELECT users WHERE id IN (distinct owner ids)   ← one query
    3. Merge in Python
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from jotter.exceptions import NotFoundError, ValidationError
from jotter.models.note import Note
from jotter.schemas.note import (
    NoteCreate,
    NoteResponse,
    NoteUpdate,
    NoteWithOwnerResponse,
    OwnerSummary,
)
from jotter.services.auth_service import AuthService
from jotter.stores.note_store import NoteStore
from jotter.stores.user_store import UserStore

logger = logging.getLogger(__name__)


def to_note_response(note: Note) -> NoteResponse:
    return NoteResponse(
        id=note.id,
        content=note.content,
        important=note.important,
        owner=note.user_id,
    )


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        Stores raise InvalidIdentifierError and DatabaseError; this layer adds
        NotFoundError and ValidationError. Everything propagates to the
        exception handlers in main.py.
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteWithOwnerResponse]:
        notes = await NoteStore(db).list_all()
        owners = await UserStore(db).find_by_ids({note.user_id for note in notes})

        items = []
        for note in notes:
            owner = owners.get(note.user_id)
            items.append(
                NoteWithOwnerResponse(
                    id=note.id,
                    content=note.content,
                    important=note.important,
                    owner=OwnerSummary(id=owner.id, username=owner.username, name=owner.name)
                    if owner
                    else None,
                )
            )
        return items

    async def get_note(self, db: AsyncSession, note_id: Any) -> NoteResponse:
        """
        Raises:
            InvalidIdentifierError: note_id is not a UUID (→ 400)
            NotFoundError: no note with that id (→ 404)
        """
        note = await NoteStore(db).find_by_id(note_id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return to_note_response(note)

    async def create_note(
        self,
        db: AsyncSession,
        auth: AuthService,
        authorization: Optional[str],
        payload: NoteCreate,
    ) -> NoteResponse:
        """
        Create a note owned by the user named in the bearer token.

        The body has already passed schema validation; the content check
        here covers callers that build NoteCreate without validation.

        Raises:
            ValidationError: empty content (→ 400)
            UnauthorizedError: any token problem (→ 401)
        """
        if not payload.content:
            raise ValidationError(message="content missing", field="content")

        users = UserStore(db)
        user = await auth.authenticate(users, authorization)

        note = await NoteStore(db).insert(
            content=payload.content,
            important=bool(payload.important),
            owner_id=user.id,
        )
        await users.append_note(user, note.id)
        return to_note_response(note)

    async def update_note(self, db: AsyncSession, note_id: Any, payload: NoteUpdate) -> NoteResponse:
        changes = payload.model_dump(exclude_unset=True)

        if "content" in changes and not changes["content"]:
            raise ValidationError(message="content must not be empty", field="content")
        # An explicit null importance means "leave unchanged"
        if changes.get("important", False) is None:
            del changes["important"]

        note = await NoteStore(db).update_by_id(note_id, changes)
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        logger.info("Note %s updated (%s)", note.id, ", ".join(sorted(changes)) or "no changes")
        return to_note_response(note)

    async def delete_note(self, db: AsyncSession, note_id: Any) -> None:
        """Delete unconditionally; an id that matches nothing still succeeds."""
        await NoteStore(db).delete_by_id(note_id)
        logger.info("Note %s deleted", note_id)


note_service = NoteService()

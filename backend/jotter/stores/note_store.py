"""
Jotter Backend — Note Store
============================

What:  Whole-record operations over the `notes` table.
Who:   NoteService and UserService.

Query plans:
    list_all:      SELECT * FROM notes ORDER BY created_at
    find_by_id:    primary key lookup
    find_by_ids:   SELECT * FROM notes WHERE id IN (...)  (one query per join)
    delete_by_id:  DELETE ... WHERE id = :id  (no existence check)
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.exceptions import DatabaseError
from jotter.models.note import Note
from jotter.stores import parse_id

logger = logging.getLogger(__name__)

# Fields a PUT may change; owner and id are immutable
UPDATABLE_FIELDS = ("content", "important")


class NoteStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[Note]:
        try:
            result = await self.session.execute(select(Note).order_by(Note.created_at))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("list_all", e)

    async def find_by_id(self, note_id: Any) -> Optional[Note]:
        uid = parse_id(note_id, "note")
        try:
            return await self.session.get(Note, uid)
        except SQLAlchemyError as e:
            raise self._database_error("find_by_id", e)

    async def find_by_ids(self, note_ids: Iterable[Any]) -> Dict[uuid.UUID, Note]:
        """Batch fetch; ids that match nothing are simply absent from the result."""
        uids = {parse_id(note_id, "note") for note_id in note_ids}
        if not uids:
            return {}
        try:
            result = await self.session.execute(select(Note).where(Note.id.in_(uids)))
            return {note.id: note for note in result.scalars().all()}
        except SQLAlchemyError as e:
            raise self._database_error("find_by_ids", e)

    async def insert(self, content: str, important: bool, owner_id: uuid.UUID) -> Note:
        note = Note(content=content, important=important, user_id=owner_id)
        try:
            self.session.add(note)
            await self.session.flush()  # assigns defaults without committing
        except SQLAlchemyError as e:
            raise self._database_error("insert", e)
        logger.info("Note %s inserted for user %s", note.id, owner_id)
        return note

    async def update_by_id(self, note_id: Any, changes: Mapping[str, Any]) -> Optional[Note]:
        """
        Apply `changes` to the note and return it, or None if the id is unknown.

        Only keys in UPDATABLE_FIELDS are applied; anything else is ignored.
        """
        note = await self.find_by_id(note_id)
        if note is None:
            return None

        for field in UPDATABLE_FIELDS:
            if field in changes:
                setattr(note, field, changes[field])

        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._database_error("update_by_id", e)
        return note

    async def delete_by_id(self, note_id: Any) -> None:
        """Delete the note if present. Unknown ids are not an error."""
        uid = parse_id(note_id, "note")
        try:
            await self.session.execute(delete(Note).where(Note.id == uid))
        except SQLAlchemyError as e:
            raise self._database_error("delete_by_id", e)

    @staticmethod
    def _database_error(operation: str, exc: SQLAlchemyError) -> DatabaseError:
        logger.error("Note store %s failed: %s", operation, exc, exc_info=True)
        return DatabaseError(
            context={"store": "notes", "operation": operation, "error_type": type(exc).__name__},
        )

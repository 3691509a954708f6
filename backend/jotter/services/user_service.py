"""
Jotter Backend — User Service
==============================

What:  User registration and the user listing with embedded notes.
Who:   Called by the /api/users routes.
"""

import logging
import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from jotter.exceptions import DuplicateUsernameError
from jotter.schemas.note import NoteSummary
from jotter.schemas.user import UserCreate, UserResponse, UserWithNotesResponse
from jotter.services.auth_service import AuthService
from jotter.stores.note_store import NoteStore
from jotter.stores.user_store import UserStore

logger = logging.getLogger(__name__)


class UserService:
    async def register(self, db: AsyncSession, auth: AuthService, payload: UserCreate) -> UserResponse:
        """
        Hash the password and insert the user.

        A taken username is rejected before bcrypt runs. The store's unique
        constraint still catches a concurrent registration of the same name.

        Raises:
            DuplicateUsernameError: username already taken (→ 400, store unchanged)
        """
        users = UserStore(db)
        if await users.find_by_username(payload.username) is not None:
            raise DuplicateUsernameError(payload.username)

        password_hash = await auth.hash_password(payload.password)
        user = await users.insert(
            username=payload.username,
            name=payload.name,
            password_hash=password_hash,
        )
        return UserResponse(
            id=user.id,
            username=user.username,
            name=user.name,
            notes=[uuid.UUID(note_id) for note_id in user.note_ids],
        )

    async def list_users(self, db: AsyncSession) -> List[UserWithNotesResponse]:
        """
        All users with their notes embedded, via one batch note query.

        Ids of notes that were deleted after creation stay in the user's
        list but are skipped here.
        """
        users = await UserStore(db).list_all()
        all_note_ids = {note_id for user in users for note_id in user.note_ids}
        notes = await NoteStore(db).find_by_ids(all_note_ids)

        result = []
        for user in users:
            owned = [notes.get(uuid.UUID(note_id)) for note_id in user.note_ids]
            result.append(
                UserWithNotesResponse(
                    id=user.id,
                    username=user.username,
                    name=user.name,
                    notes=[
                        NoteSummary(id=note.id, content=note.content, important=note.important)
                        for note in owned
                        if note is not None
                    ],
                )
            )
        return result


user_service = UserService()

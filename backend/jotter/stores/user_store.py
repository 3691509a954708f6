"""
Jotter Backend — User Store
============================

What:  Whole-record operations over the `users` table.
Who:   AuthService, NoteService and UserService.

Uniqueness:
    insert() checks for an existing username first and also translates the
    unique-constraint IntegrityError, so two concurrent registrations of the
    same name still produce DuplicateUsernameError for the loser.
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.exceptions import DatabaseError, DuplicateUsernameError
from jotter.models.user import User
from jotter.stores import parse_id

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> List[User]:
        try:
            result = await self.session.execute(select(User).order_by(User.created_at))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise self._database_error("list_all", e)

    async def find_by_username(self, username: str) -> Optional[User]:
        try:
            result = await self.session.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._database_error("find_by_username", e)

    async def find_by_id(self, user_id: Any) -> Optional[User]:
        uid = parse_id(user_id, "user")
        try:
            return await self.session.get(User, uid)
        except SQLAlchemyError as e:
            raise self._database_error("find_by_id", e)

    async def find_by_ids(self, user_ids: Iterable[Any]) -> Dict[uuid.UUID, User]:
        uids = {parse_id(user_id, "user") for user_id in user_ids}
        if not uids:
            return {}
        try:
            result = await self.session.execute(select(User).where(User.id.in_(uids)))
            return {user.id: user for user in result.scalars().all()}
        except SQLAlchemyError as e:
            raise self._database_error("find_by_ids", e)

    async def insert(self, username: str, name: Optional[str], password_hash: str) -> User:
        if await self.find_by_username(username) is not None:
            raise DuplicateUsernameError(username)

        user = User(username=username, name=name, password_hash=password_hash, note_ids=[])
        try:
            self.session.add(user)
            await self.session.flush()
        except IntegrityError:
            # Lost a race with another registration; the request's session
            # is rolled back by get_db_session
            raise DuplicateUsernameError(username)
        except SQLAlchemyError as e:
            raise self._database_error("insert", e)

        logger.info("User %s registered as '%s'", user.id, username)
        return user

    async def append_note(self, user: User, note_id: uuid.UUID) -> User:
        """Append a note reference to the user's ordered notes list and persist it."""
        # Reassign rather than mutate: plain JSON columns only track assignment
        user.note_ids = [*user.note_ids, str(note_id)]
        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise self._database_error("append_note", e)
        return user

    @staticmethod
    def _database_error(operation: str, exc: SQLAlchemyError) -> DatabaseError:
        logger.error("User store %s failed: %s", operation, exc, exc_info=True)
        return DatabaseError(
            context={"store": "users", "operation": operation, "error_type": type(exc).__name__},
        )

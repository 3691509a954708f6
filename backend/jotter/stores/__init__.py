"""
Jotter Backend — Stores (Persistence Layer)
============================================

What:  One store per entity, each wrapping an AsyncSession.
Why:   Services express whole-record operations (find, insert, update,
       delete) without writing SQL, and tests can replace a store with an
       AsyncMock.

Store Inventory:
    - NoteStore: list_all, find_by_id, find_by_ids, insert, update_by_id, delete_by_id
    - UserStore: list_all, find_by_username, find_by_id, find_by_ids, insert, append_note

Error contract:
    - Malformed ids        → InvalidIdentifierError (never NotFoundError)
    - Missing records      → None (services decide whether that is a 404)
    - Duplicate username   → DuplicateUsernameError
    - Any driver failure   → DatabaseError
"""

import uuid
from typing import Any

from jotter.exceptions import InvalidIdentifierError


def parse_id(raw_id: Any, resource: str) -> uuid.UUID:
    """Coerce a path/claim value into a UUID or raise InvalidIdentifierError."""
    if isinstance(raw_id, uuid.UUID):
        return raw_id
    try:
        return uuid.UUID(str(raw_id))
    except (TypeError, ValueError):
        raise InvalidIdentifierError(raw_id, resource=resource)

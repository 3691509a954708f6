"""
Jotter Backend — Notes Route Handlers
======================================

What:  CRUD endpoints under /api/notes.
How:   Extracts path/body/header values, delegates to NoteService, returns JSON.

Why note_id is a plain string:
    A UUID-typed path parameter would make FastAPI answer malformed ids with
    its own 422. The store validates the id instead and raises
    InvalidIdentifierError, which the handlers in main.py turn into 400.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.database import get_db_session
from jotter.schemas.common import ErrorResponse
from jotter.schemas.note import NoteCreate, NoteResponse, NoteUpdate, NoteWithOwnerResponse
from jotter.services.auth_service import AuthService, get_auth_service
from jotter.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteWithOwnerResponse],
    summary="List all notes with their owners",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteWithOwnerResponse]:
    return await note_service.list_notes(db)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed note id", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(note_id: str, db: AsyncSession = Depends(get_db_session)) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing content", "model": ErrorResponse},
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    },
    summary="Create a note owned by the authenticated user",
)
async def create_note(
    payload: NoteCreate,
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> NoteResponse:
    """
    Requires `Authorization: Bearer <token>` as issued by POST /api/login.
    The body is validated before the token is looked at.
    """
    return await note_service.create_note(db, auth, authorization, payload)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Malformed id or empty content", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
    },
    summary="Replace a note's content and/or importance",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db, note_id, payload)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"description": "Malformed note id", "model": ErrorResponse}},
    summary="Delete a note (idempotent)",
)
async def delete_note(note_id: str, db: AsyncSession = Depends(get_db_session)) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Jotter Backend — Users Route Handlers
======================================

What:  POST /api/users (register) and GET /api/users (list with notes).
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.database import get_db_session
from jotter.schemas.common import ErrorResponse
from jotter.schemas.user import UserCreate, UserResponse, UserWithNotesResponse
from jotter.services.auth_service import AuthService, get_auth_service
from jotter.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Duplicate username or invalid input", "model": ErrorResponse}},
    summary="Register a user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> UserResponse:
    return await user_service.register(db, auth, payload)


@router.get(
    "",
    response_model=List[UserWithNotesResponse],
    summary="List users with their notes",
)
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserWithNotesResponse]:
    return await user_service.list_users(db)

"""
Jotter Backend — Login Route Handler
=====================================

What:  POST /api/login exchanges username/password for a bearer token.
Security: The request body is never logged; failures use one message for
          unknown users and wrong passwords alike.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from jotter.database import get_db_session
from jotter.schemas.common import ErrorResponse
from jotter.schemas.user import LoginRequest, LoginResponse
from jotter.services.auth_service import AuthService, get_auth_service
from jotter.stores.user_store import UserStore

router = APIRouter(prefix="/api/login", tags=["Auth"])


@router.post(
    "",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid username or password", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    auth: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    return await auth.login(UserStore(db), credentials.username, credentials.password)

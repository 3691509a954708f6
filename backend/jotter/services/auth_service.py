"""
Jotter Backend — Auth Service
==============================

What:  Password hashing, login, bearer token issuing and verification.
Who:   Built once by create_app() from the Settings object and stored on
       `app.state.auth_service`; routes receive it through get_auth_service.
How:   bcrypt for salted password hashes, PyJWT (HS256 by default) for
       tokens. Tokens carry `username` and `id` and have no expiry.

Failure policy:
    Every check raises UnauthorizedError the moment it fails. Nothing after
    a failed check runs, so a rejected request can never reach a lookup on
    a missing user or produce a second response.

Login flow:
    username ──▶ find_by_username ──(none)──▶ 401
                       │
                       ▼
                 bcrypt.checkpw ──(mismatch)──▶ 401
                       │
                       ▼
                 sign {username, id} ──▶ 200 {token, username, name}
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Request

from jotter.config import Settings
from jotter.exceptions import InvalidIdentifierError, UnauthorizedError
from jotter.models.user import User
from jotter.schemas.user import MAX_PASSWORD_BYTES, LoginResponse
from jotter.stores.user_store import UserStore

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class AuthService:
    """
    Authentication operations bound to one application's settings.

    Attributes:
        secret:     HMAC key used to sign and verify tokens
        algorithm:  JWT algorithm name (HS256 unless configured)
        rounds:     bcrypt cost factor for new hashes
    """

    def __init__(self, settings: Settings):
        self.secret = settings.secret
        self.algorithm = settings.jwt_algorithm
        self.rounds = settings.bcrypt_rounds

    # ── Passwords ─────────────────────────────────────────────────────────

    async def hash_password(self, password: str) -> str:
        """
        Hash a password with a fresh salt.

        bcrypt is CPU-bound (~250ms at 12 rounds), so it runs in a worker
        thread instead of blocking the event loop.
        """
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)
        )
        return hashed.decode("utf-8")

    async def verify_password(self, password: str, password_hash: str) -> bool:
        # bcrypt rejects longer input outright; no stored hash can match one
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        return await asyncio.to_thread(
            bcrypt.checkpw, password.encode("utf-8"), password_hash.encode("utf-8")
        )

    # ── Tokens ────────────────────────────────────────────────────────────

    def issue_token(self, user: User) -> str:
        claims = {"username": user.username, "id": str(user.id)}
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Verify the signature and return the claims.

        Raises:
            UnauthorizedError: bad signature, wrong algorithm, or garbage input
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as e:
            logger.warning("Rejected bearer token: %s", type(e).__name__)
            raise UnauthorizedError(message="token invalid", context={"reason": type(e).__name__})

    @staticmethod
    def extract_bearer_token(authorization: Optional[str]) -> str:
        """
        Pull the token out of an `Authorization: Bearer <token>` header.

        A missing header, another scheme, or an empty token is a 401.
        """
        if not authorization:
            raise UnauthorizedError(message="token missing")
        scheme, _, token = authorization.strip().partition(" ")
        token = token.strip()
        if scheme.lower() != BEARER_SCHEME or not token:
            raise UnauthorizedError(message="token missing or malformed")
        return token

    # ── Flows ─────────────────────────────────────────────────────────────

    async def login(self, users: UserStore, username: str, password: str) -> LoginResponse:
        user = await users.find_by_username(username)
        if user is None:
            logger.info("Login failed: unknown username")
            raise UnauthorizedError(message="invalid username or password")

        if not await self.verify_password(password, user.password_hash):
            logger.info("Login failed for user %s: wrong password", user.id)
            raise UnauthorizedError(message="invalid username or password")

        logger.info("User %s logged in", user.id)
        return LoginResponse(
            token=self.issue_token(user),
            username=user.username,
            name=user.name,
        )

    async def authenticate(self, users: UserStore, authorization: Optional[str]) -> User:
        """
        Resolve the acting user from an Authorization header value.

        Raises:
            UnauthorizedError: missing/malformed header, bad signature,
                               no `id` claim, or a user that no longer exists
        """
        token = self.extract_bearer_token(authorization)
        claims = self.decode_token(token)

        user_id = claims.get("id")
        if not user_id:
            raise UnauthorizedError(message="token invalid", context={"reason": "missing id claim"})

        try:
            user = await users.find_by_id(user_id)
        except InvalidIdentifierError:
            raise UnauthorizedError(message="token invalid", context={"reason": "malformed id claim"})

        if user is None:
            raise UnauthorizedError(message="token invalid", context={"reason": "unknown user"})
        return user


def get_auth_service(request: Request) -> AuthService:
    """FastAPI dependency returning the application's AuthService."""
    return request.app.state.auth_service

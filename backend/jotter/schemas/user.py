"""
Jotter Backend — User and Login Schemas
========================================

What:  Pydantic models for registration, user listing and login.
Security: No response model has a password or hash field, so a hash can
       never be serialized by accident.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from jotter.schemas.note import NoteSummary

# bcrypt only uses the first 72 bytes of a password; longer ones are rejected
MAX_PASSWORD_BYTES = 72


class UserCreate(BaseModel):
    """Body of POST /api/users."""
    username: str = Field(min_length=3, max_length=64, description="Unique login name")
    name: Optional[str] = Field(default=None, max_length=255, description="Display name")
    password: str = Field(min_length=3, description="Plain password; only its hash is stored")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class UserResponse(BaseModel):
    """A user as returned by POST /api/users; `notes` holds note ids."""
    id: uuid.UUID
    username: str
    name: Optional[str] = None
    notes: List[uuid.UUID] = Field(default_factory=list)


class UserWithNotesResponse(BaseModel):
    """Item of GET /api/users, with the user's notes embedded."""
    id: uuid.UUID
    username: str
    name: Optional[str] = None
    notes: List[NoteSummary] = Field(default_factory=list)


class LoginRequest(BaseModel):
    """Body of POST /api/login."""
    username: str
    password: str


class LoginResponse(BaseModel):
    """
    What:  Successful login result.
    How:   Clients send `token` back as `Authorization: Bearer <token>`.
    """
    token: str
    username: str
    name: Optional[str] = None

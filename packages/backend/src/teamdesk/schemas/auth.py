"""Pydantic schemas for registration, login, and user info.

Learn: email/password are Optional here on purpose. Missing credentials
are reported by the auth service as ValidationError (400) with one
consistent message, instead of a schema-level error per field.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from teamdesk.schemas.base import ApiModel


class RegisterRequest(ApiModel):
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = None
    name: Optional[str] = Field(None, max_length=100)
    team_name: Optional[str] = Field(None, max_length=100)


class LoginRequest(ApiModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(ApiModel):
    id: uuid.UUID
    email: str
    name: str
    role: str
    team_name: str
    created_at: datetime


class AuthResponse(ApiModel):
    message: str
    user: UserRead
    token: str


class IdentityRead(ApiModel):
    """The verified token claims, as attached to the request."""
    id: str
    email: str
    name: str
    role: str
    team_name: Optional[str] = None
    team_id: Optional[str] = None


class MeResponse(ApiModel):
    user: IdentityRead

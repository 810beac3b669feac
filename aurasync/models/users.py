"""Pydantic models for registration, login, and token exchange."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import EmailStr, Field

from aurasync.models.base import AuraSyncBase


class BiologicalSex(str, Enum):
    female = "female"
    male = "male"
    intersex = "intersex"
    undisclosed = "undisclosed"


class RegisterRequest(AuraSyncBase):
    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    display_name: str = Field(min_length=1, max_length=100)
    biological_sex: BiologicalSex | None = None
    date_of_birth: date | None = None


class LoginRequest(AuraSyncBase):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(AuraSyncBase):
    refresh_token: str = Field(min_length=1)


class UserRead(AuraSyncBase):
    user_id: uuid.UUID
    email: str
    display_name: str
    biological_sex: BiologicalSex | None = None
    date_of_birth: date | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None


class AuthResponse(AuraSyncBase):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserRead


class AccessTokenResponse(AuraSyncBase):
    access_token: str
    token_type: str = "bearer"

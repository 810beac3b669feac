"""Registration, login, and token refresh."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from aurasync.dependencies import AppSettings, CurrentUser, Db
from aurasync.models.users import (
    AccessTokenResponse,
    AuthResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    UserRead,
)
from aurasync.services.security import (
    REFRESH,
    TokenError,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_secret,
    verify_secret,
)

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("aurasync.auth")

_USER_COLUMNS = "user_id, email, display_name, biological_sex, date_of_birth, created_at, last_login"


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, db: Db, settings: AppSettings) -> Any:
    email = body.email.lower()
    existing = await db.fetchval("SELECT user_id FROM users WHERE email = $1", email)
    if existing:
        raise HTTPException(status_code=409, detail="Email already registered")

    password_hash = hash_secret(body.password, settings.bcrypt_rounds)
    row = await db.fetchrow(
        f"""
        INSERT INTO users (email, password_hash, display_name, biological_sex, date_of_birth)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {_USER_COLUMNS}
        """,
        email, password_hash, body.display_name,
        body.biological_sex.value if body.biological_sex else None,
        body.date_of_birth,
    )
    user = dict(row)
    logger.info("Registered user %s", user["user_id"])
    return {
        "access_token": create_access_token(user["user_id"], user["email"], settings),
        "refresh_token": create_refresh_token(user["user_id"], settings),
        "user": user,
    }


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: Db, settings: AppSettings) -> Any:
    row = await db.fetchrow(
        f"SELECT {_USER_COLUMNS}, password_hash, is_active FROM users WHERE email = $1",
        body.email.lower(),
    )
    if not row or not verify_secret(body.password, row["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not row["is_active"]:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    await db.execute(
        "UPDATE users SET last_login = NOW() WHERE user_id = $1", row["user_id"]
    )
    user = {k: v for k, v in dict(row).items() if k not in ("password_hash", "is_active")}
    return {
        "access_token": create_access_token(user["user_id"], user["email"], settings),
        "refresh_token": create_refresh_token(user["user_id"], settings),
        "user": user,
    }


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(body: RefreshRequest, db: Db, settings: AppSettings) -> Any:
    try:
        claims = decode_token(body.refresh_token, REFRESH, settings)
    except TokenError as exc:
        raise HTTPException(status_code=403, detail="Invalid or expired refresh token") from exc

    email = await db.fetchval(
        "SELECT email FROM users WHERE user_id = $1 AND is_active = TRUE", claims["sub"]
    )
    if email is None:
        raise HTTPException(status_code=403, detail="Invalid refresh token")
    return {"access_token": create_access_token(claims["sub"], email, settings)}


@router.get("/me", response_model=UserRead)
async def me(user: CurrentUser, db: Db) -> Any:
    row = await db.fetchrow(
        f"SELECT {_USER_COLUMNS} FROM users WHERE user_id = $1", user.user_id
    )
    if not row:
        raise HTTPException(status_code=404, detail="User not found")
    return dict(row)

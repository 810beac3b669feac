"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from aurasync.config import Settings, get_settings
from aurasync.services.database import Database
from aurasync.services.security import JOURNAL, TokenError, decode_token


@dataclass(frozen=True)
class AuthContext:
    """Authenticated user context extracted from the access token."""

    user_id: uuid.UUID
    email: str | None = None


async def get_current_user(request: Request) -> AuthContext:
    """Extract the authenticated user from the request state.

    The JWT auth middleware sets ``request.state.auth`` before routes run.
    """
    auth: AuthContext | None = getattr(request.state, "auth", None)
    if auth is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth


def get_db(request: Request) -> Database:
    """Return the database handle created in the app lifespan."""
    db: Database | None = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_today() -> date:
    """Reference day for streaks and cycle phase.  Overridden in tests."""
    return date.today()


async def require_journal_access(
    user: Annotated[AuthContext, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
    x_journal_token: Annotated[str | None, Header()] = None,
) -> AuthContext:
    """Require a valid journal unlock token for the authenticated user."""
    if not x_journal_token:
        raise HTTPException(status_code=403, detail="Journal is locked")
    try:
        claims = decode_token(x_journal_token, JOURNAL, settings)
    except TokenError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    if claims["sub"] != user.user_id:
        raise HTTPException(status_code=403, detail="Journal token does not match user")
    return user


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
JournalUser = Annotated[AuthContext, Depends(require_journal_access)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Db = Annotated[Database, Depends(get_db)]
Today = Annotated[date, Depends(get_today)]

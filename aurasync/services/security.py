"""Password / PIN hashing and JWT issuance.

Three token kinds share the same claim layout (``sub``, ``type``, ``exp``):

- ``access`` : short-lived API token, signed with ``jwt_secret``
- ``refresh``: long-lived, signed with ``jwt_refresh_secret``
- ``journal``: short-lived journal unlock token, signed with ``jwt_secret``
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt as pyjwt

from aurasync.config import Settings

logger = logging.getLogger("aurasync.security")

ACCESS = "access"
REFRESH = "refresh"
JOURNAL = "journal"

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


class TokenError(Exception):
    """Raised when a token is malformed, expired, or of the wrong kind."""


def hash_secret(secret: str, rounds: int = 10) -> str:
    """bcrypt-hash a password or journal PIN."""
    hashed = bcrypt.hashpw(secret.encode("utf-8")[:_BCRYPT_MAX_BYTES], bcrypt.gensalt(rounds))
    return hashed.decode("utf-8")


def verify_secret(secret: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(
            secret.encode("utf-8")[:_BCRYPT_MAX_BYTES], hashed.encode("utf-8")
        )
    except ValueError:
        logger.warning("Stored hash is not a valid bcrypt hash")
        return False


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(claims: dict[str, Any], secret: str, ttl: timedelta, settings: Settings) -> str:
    issued = _now()
    payload = {**claims, "iat": issued, "exp": issued + ttl}
    return pyjwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: uuid.UUID, email: str, settings: Settings) -> str:
    return _encode(
        {"sub": str(user_id), "email": email, "type": ACCESS},
        settings.jwt_secret,
        timedelta(minutes=settings.access_token_ttl_minutes),
        settings,
    )


def create_refresh_token(user_id: uuid.UUID, settings: Settings) -> str:
    return _encode(
        {"sub": str(user_id), "type": REFRESH},
        settings.jwt_refresh_secret,
        timedelta(days=settings.refresh_token_ttl_days),
        settings,
    )


def create_journal_token(user_id: uuid.UUID, settings: Settings) -> tuple[str, datetime]:
    """Issue a journal-scoped token.  Returns the token and its expiry."""
    ttl = timedelta(minutes=settings.journal_token_ttl_minutes)
    token = _encode(
        {"sub": str(user_id), "type": JOURNAL, "scope": "journal"},
        settings.jwt_secret,
        ttl,
        settings,
    )
    return token, _now() + ttl


def decode_token(token: str, expected_type: str, settings: Settings) -> dict[str, Any]:
    """Verify ``token`` and return its claims.

    Raises:
        TokenError: On bad signature, expiry, missing subject, or a token of
            another kind.
    """
    secret = settings.jwt_refresh_secret if expected_type == REFRESH else settings.jwt_secret
    try:
        payload = pyjwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except pyjwt.ExpiredSignatureError as exc:
        raise TokenError("Token expired") from exc
    except pyjwt.InvalidTokenError as exc:
        raise TokenError("Invalid token") from exc

    if payload.get("type") != expected_type:
        raise TokenError(f"Expected {expected_type} token")
    try:
        payload["sub"] = uuid.UUID(payload["sub"])
    except (KeyError, ValueError, TypeError) as exc:
        raise TokenError("Token subject is not a user id") from exc
    return payload

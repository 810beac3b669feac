"""PIN-protected, encrypted journal.

Entry bodies are stored Fernet-encrypted.  Listings return metadata only;
reading a decrypted entry needs the short-lived token from ``/unlock``,
sent as ``X-Journal-Token``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from aurasync.config import Settings
from aurasync.dependencies import AppSettings, CurrentUser, Db, JournalUser, Today
from aurasync.models.base import SuccessResponse
from aurasync.models.journal import (
    JournalEntryCreate,
    JournalEntryRead,
    JournalEntrySummary,
    JournalEntryUpdate,
    JournalSecuritySetup,
    JournalUnlockRequest,
    JournalUnlockResponse,
)
from aurasync.services.encryption import JournalCipher, JournalDecryptionError
from aurasync.services.security import create_journal_token, hash_secret, verify_secret
from aurasync.wellness.journal import JournalLockPolicy, count_words

router = APIRouter(prefix="/journal", tags=["journal"])
logger = logging.getLogger("aurasync.journal")

_SUMMARY_COLUMNS = "entry_id, entry_date, prompt_used, word_count, created_at, updated_at"


def _lock_policy(settings: Settings) -> JournalLockPolicy:
    return JournalLockPolicy(
        max_failed_attempts=settings.journal_max_failed_attempts,
        lockout=timedelta(minutes=settings.journal_lockout_minutes),
    )


# ---------- Security ----------

@router.post("/security", response_model=SuccessResponse)
async def setup_security(
    user: CurrentUser, db: Db, settings: AppSettings, body: JournalSecuritySetup
) -> Any:
    pin_hash = hash_secret(body.pin, settings.bcrypt_rounds)
    await db.execute(
        """
        INSERT INTO journal_security (user_id, auth_method, pin_hash)
        VALUES ($1, $2, $3)
        ON CONFLICT (user_id) DO UPDATE SET
            auth_method = EXCLUDED.auth_method,
            pin_hash = EXCLUDED.pin_hash,
            failed_attempts = 0,
            locked_until = NULL,
            updated_at = NOW()
        """,
        user.user_id, body.auth_method.value, pin_hash,
    )
    return SuccessResponse()


@router.post("/unlock", response_model=JournalUnlockResponse)
async def unlock(
    user: CurrentUser, db: Db, settings: AppSettings, body: JournalUnlockRequest
) -> Any:
    security = await db.fetchrow(
        "SELECT pin_hash, failed_attempts, locked_until FROM journal_security WHERE user_id = $1",
        user.user_id,
    )
    if not security:
        raise HTTPException(status_code=404, detail="Journal security not set up")

    policy = _lock_policy(settings)
    now = datetime.now(timezone.utc)
    if policy.is_locked(security["locked_until"], now):
        raise HTTPException(status_code=423, detail="Journal is locked. Try again later.")

    if not verify_secret(body.pin, security["pin_hash"]):
        state = policy.register_failure(security["failed_attempts"], now)
        await db.execute(
            "UPDATE journal_security SET failed_attempts = $1, locked_until = $2 WHERE user_id = $3",
            state.failed_attempts, state.locked_until, user.user_id,
        )
        if state.locked_until:
            logger.warning("Journal locked for user %s after %d failed attempts",
                           user.user_id, state.failed_attempts)
        raise HTTPException(
            status_code=401,
            detail={"message": "Invalid PIN", "attempts_remaining": state.attempts_remaining},
        )

    await db.execute(
        "UPDATE journal_security SET failed_attempts = 0, locked_until = NULL WHERE user_id = $1",
        user.user_id,
    )
    token, expires_at = create_journal_token(user.user_id, settings)
    return {"access_token": token, "expires_at": expires_at}


# ---------- Entries ----------

@router.get("/entries", response_model=list[JournalEntrySummary])
async def list_entries(
    user: CurrentUser,
    db: Db,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> Any:
    conditions = ["user_id = $1"]
    params: list[Any] = [user.user_id]
    idx = 2

    if start_date:
        conditions.append(f"entry_date >= ${idx}")
        params.append(start_date)
        idx += 1
    if end_date:
        conditions.append(f"entry_date <= ${idx}")
        params.append(end_date)
        idx += 1

    where = " AND ".join(conditions)
    rows = await db.fetch(
        f"SELECT {_SUMMARY_COLUMNS} FROM journal_entries WHERE {where} ORDER BY entry_date DESC",
        *params,
    )
    return [dict(r) for r in rows]


@router.get("/entries/{entry_id}", response_model=JournalEntryRead)
async def get_entry(
    entry_id: uuid.UUID, user: JournalUser, db: Db, settings: AppSettings
) -> Any:
    row = await db.fetchrow(
        f"""
        SELECT {_SUMMARY_COLUMNS}, encrypted_content FROM journal_entries
        WHERE entry_id = $1 AND user_id = $2
        """,
        entry_id, user.user_id,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Entry not found")

    entry = dict(row)
    try:
        entry["content"] = JournalCipher.from_settings(settings).decrypt(
            entry.pop("encrypted_content")
        )
    except JournalDecryptionError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return entry


@router.post("/entries", response_model=JournalEntrySummary, status_code=201)
async def create_entry(
    user: CurrentUser, db: Db, settings: AppSettings, today: Today, body: JournalEntryCreate
) -> Any:
    encrypted = JournalCipher.from_settings(settings).encrypt(body.content)
    row = await db.fetchrow(
        f"""
        INSERT INTO journal_entries (
            user_id, entry_date, encrypted_content, encryption_key_id, prompt_used, word_count
        ) VALUES ($1, $2, $3, 'default', $4, $5)
        RETURNING {_SUMMARY_COLUMNS}
        """,
        user.user_id, body.entry_date or today, encrypted, body.prompt_used,
        count_words(body.content),
    )
    return dict(row)


@router.patch("/entries/{entry_id}", response_model=JournalEntrySummary)
async def update_entry(
    entry_id: uuid.UUID, user: CurrentUser, db: Db, settings: AppSettings, body: JournalEntryUpdate
) -> Any:
    encrypted = JournalCipher.from_settings(settings).encrypt(body.content)
    row = await db.fetchrow(
        f"""
        UPDATE journal_entries SET
            encrypted_content = $1,
            word_count = $2,
            updated_at = NOW()
        WHERE entry_id = $3 AND user_id = $4
        RETURNING {_SUMMARY_COLUMNS}
        """,
        encrypted, count_words(body.content), entry_id, user.user_id,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Entry not found")
    return dict(row)


@router.delete("/entries/{entry_id}", status_code=204)
async def delete_entry(entry_id: uuid.UUID, user: CurrentUser, db: Db) -> None:
    result = await db.execute(
        "DELETE FROM journal_entries WHERE entry_id = $1 AND user_id = $2",
        entry_id, user.user_id,
    )
    if result == "DELETE 0":
        raise HTTPException(status_code=404, detail="Entry not found")

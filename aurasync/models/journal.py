"""Pydantic models for journal security and encrypted journal entries."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import Field

from aurasync.models.base import AuraSyncBase


class JournalAuthMethod(str, Enum):
    pin = "pin"
    biometric = "biometric"


class JournalSecuritySetup(AuraSyncBase):
    pin: str = Field(min_length=4, max_length=12, pattern=r"^\d+$")
    auth_method: JournalAuthMethod = JournalAuthMethod.pin


class JournalUnlockRequest(AuraSyncBase):
    pin: str = Field(min_length=1)


class JournalUnlockResponse(AuraSyncBase):
    access_token: str
    expires_at: datetime


class JournalEntryCreate(AuraSyncBase):
    content: str = Field(min_length=1)
    prompt_used: str | None = None
    entry_date: date | None = None


class JournalEntryUpdate(AuraSyncBase):
    content: str = Field(min_length=1)


class JournalEntrySummary(AuraSyncBase):
    """Entry metadata.  Content is never included in listings."""

    entry_id: uuid.UUID
    entry_date: date
    prompt_used: str | None = None
    word_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class JournalEntryRead(JournalEntrySummary):
    content: str

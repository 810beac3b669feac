"""Pydantic models for the health timeline: symptoms, moods, medications, supplements."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from aurasync.models.base import AuraSyncBase


class TimelineEntryType(str, Enum):
    symptom = "symptom"
    mood = "mood"
    medication = "medication"
    supplement = "supplement"


class TimelineEntryRead(AuraSyncBase):
    entry_id: uuid.UUID
    user_id: uuid.UUID
    entry_type: TimelineEntryType
    entry_date: datetime
    data: dict[str, Any] | None = None
    created_at: datetime | None = None


# ---------- Detail payloads ----------

class SymptomCreate(AuraSyncBase):
    symptom_name: str = Field(min_length=1)
    severity: int | None = Field(default=None, ge=1, le=10)
    body_part: str | None = None
    notes: str | None = None
    entry_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)


class MoodCreate(AuraSyncBase):
    mood_rating: int = Field(ge=1, le=10)
    mood_descriptor: str | None = None
    energy_level: int | None = Field(default=None, ge=1, le=10)
    notes: str | None = None
    entry_date: datetime | None = None


class MedicationCreate(AuraSyncBase):
    medication_name: str = Field(min_length=1)
    dosage: str | None = None
    taken_at: datetime | None = None
    was_taken: bool = True
    notes: str | None = None


class SupplementCreate(AuraSyncBase):
    supplement_name: str = Field(min_length=1)
    dosage: str | None = None
    taken_at: datetime | None = None
    was_taken: bool = True


class TimelineLogResult(AuraSyncBase):
    """A newly written timeline row plus its type-specific detail row."""

    timeline_entry: TimelineEntryRead
    detail: dict[str, Any]

"""Pydantic models for habits, completions, streaks, and achievements."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from aurasync.models.base import AuraSyncBase, TimestampMixin


class HabitFrequency(str, Enum):
    daily = "daily"
    weekly = "weekly"


# ---------- Habits ----------

class HabitBase(AuraSyncBase):
    habit_name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    frequency: HabitFrequency = HabitFrequency.daily
    target_days_per_week: int = Field(default=7, ge=1, le=7)
    color_hex: str = Field(default="#005B6A", pattern=r"^#[0-9A-Fa-f]{6}$")
    icon_name: str | None = None


class HabitCreate(HabitBase):
    pass


class HabitUpdate(AuraSyncBase):
    habit_name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    is_active: bool | None = None
    order_position: int | None = Field(default=None, ge=0)

    @field_validator("habit_name", "is_active", "order_position")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        # the columns are NOT NULL; leave a field out to keep its value
        if value is None:
            raise ValueError("field may be omitted but not null")
        return value


class HabitRead(HabitBase, TimestampMixin):
    habit_id: uuid.UUID
    user_id: uuid.UUID
    is_active: bool = True
    order_position: int = 0


class HabitWithStreak(HabitRead):
    current_streak: int = 0
    longest_streak: int = 0


class HabitList(AuraSyncBase):
    habits: list[HabitWithStreak]
    completions: dict[str, bool]  # habit_id -> completed on `as_of`
    as_of: date


# ---------- Completions / streaks ----------

class CompletionCreate(AuraSyncBase):
    completion_date: date | None = None  # defaults to today
    notes: str | None = None


class CompletionRead(AuraSyncBase):
    completion_id: uuid.UUID
    habit_id: uuid.UUID
    completion_date: date
    notes: str | None = None


class StreakRead(AuraSyncBase):
    habit_id: uuid.UUID
    current_streak: int = 0
    longest_streak: int = 0
    last_completion_date: date | None = None


# ---------- Achievements ----------

class AchievementRead(AuraSyncBase):
    achievement_id: uuid.UUID
    user_id: uuid.UUID
    achievement_type: str
    achievement_name: str
    achievement_description: str | None = None
    is_viewed: bool = False
    earned_at: datetime | None = None


class AchievementList(AuraSyncBase):
    achievements: list[AchievementRead]
    unviewed_count: int


class CompletionResult(AuraSyncBase):
    completion: CompletionRead | None = None  # None if already completed that day
    streak: StreakRead
    achievement_earned: AchievementRead | None = None


class UncompleteResult(AuraSyncBase):
    success: bool = True
    streak: StreakRead

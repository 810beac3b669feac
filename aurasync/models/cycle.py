"""Pydantic models for periods, predictions, daily cycle logs, and insights."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import Field, field_validator, model_validator

from aurasync.models.base import AuraSyncBase


# ---------- Enums ----------

class CyclePhase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulation = "ovulation"
    luteal = "luteal"
    unknown = "unknown"


class FlowLevel(str, Enum):
    spotting = "spotting"
    light = "light"
    medium = "medium"
    heavy = "heavy"


class OvulationTestResult(str, Enum):
    positive = "positive"
    negative = "negative"
    peak = "peak"
    invalid = "invalid"


# ---------- Periods ----------

class PeriodCreate(AuraSyncBase):
    start_date: date
    end_date: date | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "PeriodCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PeriodUpdate(AuraSyncBase):
    end_date: date | None = None  # null clears the end date
    is_confirmed: bool | None = None
    notes: str | None = None

    @field_validator("is_confirmed")
    @classmethod
    def _confirmed_not_null(cls, value: bool | None) -> bool:
        if value is None:
            raise ValueError("is_confirmed may be omitted but not null")
        return value


class PeriodRead(AuraSyncBase):
    period_id: uuid.UUID
    user_id: uuid.UUID
    start_date: date
    end_date: date | None = None
    cycle_length_days: int | None = None
    is_confirmed: bool = True
    notes: str | None = None
    created_at: datetime | None = None


# ---------- Predictions ----------

class PredictionRead(AuraSyncBase):
    prediction_id: uuid.UUID
    user_id: uuid.UUID
    predicted_period_start: date
    predicted_period_end: date
    predicted_ovulation_start: date
    predicted_ovulation_end: date
    confidence_score: float
    generated_at: datetime | None = None


class FertilityWindow(AuraSyncBase):
    start: date
    end: date


class PredictionSummary(AuraSyncBase):
    next_period_date: date | None = None
    next_ovulation_date: date | None = None
    fertility_window: FertilityWindow | None = None
    confidence_score: float | None = None


# ---------- Overview / calendar / insights ----------

class CycleOverview(AuraSyncBase):
    current_phase: CyclePhase
    current_day: int
    cycle_length: int
    last_period: PeriodRead | None = None
    next_predicted: PredictionRead | None = None


class DailyLogCreate(AuraSyncBase):
    log_date: date | None = None  # defaults to today
    flow_level: FlowLevel | None = None
    symptoms: list[str] = Field(default_factory=list)
    mood: str | None = None
    sexual_activity: bool = False
    notes: str | None = None


class DailyLogRead(AuraSyncBase):
    log_id: uuid.UUID
    user_id: uuid.UUID
    log_date: date
    flow_level: FlowLevel | None = None
    symptoms: list[str] = Field(default_factory=list)
    mood: str | None = None
    sexual_activity: bool = False
    notes: str | None = None


class OvulationTestCreate(AuraSyncBase):
    test_date: date
    result: OvulationTestResult
    notes: str | None = None


class OvulationTestRead(OvulationTestCreate):
    test_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime | None = None


class CycleCalendar(AuraSyncBase):
    periods: list[PeriodRead]
    predictions: list[PredictionRead]
    daily_logs: list[DailyLogRead]


class SymptomCount(AuraSyncBase):
    symptom: str
    count: int


class CycleInsights(AuraSyncBase):
    average_cycle_length: float | None = None
    cycle_length_variability: float | None = None
    cycles_used: int = 0
    common_symptoms: list[SymptomCount] = Field(default_factory=list)


# ---------- Profile ----------

class CycleProfileUpdate(AuraSyncBase):
    average_cycle_length: int = Field(default=28, ge=15, le=90)
    average_period_length: int = Field(default=5, ge=1, le=15)
    tracking_goal: str | None = None


class CycleProfileRead(CycleProfileUpdate):
    user_id: uuid.UUID
    updated_at: datetime | None = None


class PeriodLogged(AuraSyncBase):
    period: PeriodRead
    prediction: PredictionRead | None = None  # only when a previous period exists

"""Pydantic models for fitness profiles, meals, water intake, and workouts."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import Field, model_validator

from aurasync.models.base import AuraSyncBase


class ActivityLevel(str, Enum):
    sedentary = "sedentary"
    light = "light"
    moderate = "moderate"
    active = "active"
    very_active = "very_active"


class MealType(str, Enum):
    breakfast = "breakfast"
    lunch = "lunch"
    dinner = "dinner"
    snack = "snack"


# ---------- Profile ----------

class FitnessProfileUpdate(AuraSyncBase):
    current_weight_kg: float | None = Field(default=None, gt=0, le=500)
    target_weight_kg: float | None = Field(default=None, gt=0, le=500)
    height_cm: float | None = Field(default=None, gt=0, le=300)
    daily_calorie_goal: int = Field(default=2000, ge=0, le=10000)
    daily_protein_g: int = Field(default=150, ge=0, le=1000)
    daily_carbs_g: int = Field(default=200, ge=0, le=2000)
    daily_fat_g: int = Field(default=65, ge=0, le=1000)
    daily_water_glasses: int = Field(default=8, ge=0, le=50)
    activity_level: ActivityLevel = ActivityLevel.moderate


class FitnessProfileRead(FitnessProfileUpdate):
    user_id: uuid.UUID
    updated_at: datetime | None = None


# ---------- Meals ----------

class MealItemCreate(AuraSyncBase):
    food_name: str = Field(min_length=1, max_length=200)
    serving_size: str | None = None
    serving_quantity: float = Field(default=1, gt=0)
    calories: float = Field(default=0, ge=0)
    protein_g: float = Field(default=0, ge=0)
    carbs_g: float = Field(default=0, ge=0)
    fat_g: float = Field(default=0, ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    sugar_g: float | None = Field(default=None, ge=0)
    sodium_mg: float | None = Field(default=None, ge=0)
    barcode: str | None = None
    is_custom: bool = False


class MealItemRead(MealItemCreate):
    item_id: uuid.UUID
    meal_id: uuid.UUID


class MealCreate(AuraSyncBase):
    meal_type: MealType
    meal_name: str | None = None
    consumed_at: datetime | None = None  # defaults to now
    items: list[MealItemCreate] = Field(min_length=1)


class MealRead(AuraSyncBase):
    meal_id: uuid.UUID
    user_id: uuid.UUID
    meal_type: MealType
    meal_name: str | None = None
    consumed_at: datetime
    total_calories: float = 0
    total_protein_g: float = 0
    total_carbs_g: float = 0
    total_fat_g: float = 0
    items: list[MealItemRead] = Field(default_factory=list)


# ---------- Water ----------

class WaterLogCreate(AuraSyncBase):
    glasses: int = Field(default=1, ge=1, le=20)
    logged_at: datetime | None = None


class WaterLogRead(AuraSyncBase):
    log_id: uuid.UUID
    user_id: uuid.UUID
    glasses: int
    logged_at: datetime
    log_date: date


# ---------- Workouts ----------

class WorkoutExerciseCreate(AuraSyncBase):
    exercise_name: str = Field(min_length=1, max_length=200)
    sets: int | None = Field(default=None, ge=0)
    reps: int | None = Field(default=None, ge=0)
    weight_kg: float | None = Field(default=None, ge=0)
    duration_seconds: int | None = Field(default=None, ge=0)
    distance_km: float | None = Field(default=None, ge=0)
    calories_burned: int | None = Field(default=None, ge=0)
    notes: str | None = None


class WorkoutExerciseRead(WorkoutExerciseCreate):
    workout_exercise_id: uuid.UUID
    workout_id: uuid.UUID
    exercise_order: int


class WorkoutCreate(AuraSyncBase):
    workout_name: str | None = None
    workout_type: str | None = None
    started_at: datetime
    completed_at: datetime | None = None
    exercises: list[WorkoutExerciseCreate] = Field(default_factory=list)

    @model_validator(mode="after")
    def _completed_after_start(self) -> "WorkoutCreate":
        if self.completed_at is not None and self.completed_at < self.started_at:
            raise ValueError("completed_at must not be before started_at")
        return self


class WorkoutRead(AuraSyncBase):
    workout_id: uuid.UUID
    user_id: uuid.UUID
    workout_name: str | None = None
    workout_type: str | None = None
    started_at: datetime
    completed_at: datetime | None = None
    total_calories_burned: int = 0
    exercises: list[WorkoutExerciseRead] = Field(default_factory=list)


# ---------- Dashboard ----------

class MacroProgress(AuraSyncBase):
    protein: float
    protein_goal: int
    carbs: float
    carbs_goal: int
    fat: float
    fat_goal: int


class FitnessDashboard(AuraSyncBase):
    day: date
    calories_consumed: int
    calories_goal: int
    calories_burned: int
    net_calories: int
    macros: MacroProgress
    water_intake: int
    water_goal: int
    meals_count: int
    workouts_completed: int

"""Meal macro totals and the daily fitness summary.

The router reads meal, workout and water rows for one day and hands plain
numbers to :func:`summarize_day`; nothing here touches storage.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

DEFAULT_CALORIE_GOAL = 2000
DEFAULT_PROTEIN_G = 150
DEFAULT_CARBS_G = 200
DEFAULT_FAT_G = 65
DEFAULT_WATER_GLASSES = 8


@dataclass(frozen=True)
class MacroTotals:
    """Energy and macronutrients for one food item, one meal, or one day."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0

    def __add__(self, other: MacroTotals) -> MacroTotals:
        return MacroTotals(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fat_g=self.fat_g + other.fat_g,
        )


def sum_macros(items: Iterable[MacroTotals]) -> MacroTotals:
    total = MacroTotals()
    for item in items:
        total = total + item
    return total


@dataclass(frozen=True)
class DailyGoals:
    calories: int = DEFAULT_CALORIE_GOAL
    protein_g: int = DEFAULT_PROTEIN_G
    carbs_g: int = DEFAULT_CARBS_G
    fat_g: int = DEFAULT_FAT_G
    water_glasses: int = DEFAULT_WATER_GLASSES

    @classmethod
    def from_profile(cls, profile: Mapping[str, Any] | None) -> DailyGoals:
        """Goals from a stored fitness profile; missing or zero values use defaults."""
        if not profile:
            return cls()
        return cls(
            calories=profile.get("daily_calorie_goal") or DEFAULT_CALORIE_GOAL,
            protein_g=profile.get("daily_protein_g") or DEFAULT_PROTEIN_G,
            carbs_g=profile.get("daily_carbs_g") or DEFAULT_CARBS_G,
            fat_g=profile.get("daily_fat_g") or DEFAULT_FAT_G,
            water_glasses=profile.get("daily_water_glasses") or DEFAULT_WATER_GLASSES,
        )


@dataclass(frozen=True)
class DaySummary:
    day: date
    consumed: MacroTotals
    calories_burned: int
    water_glasses: int
    meals_count: int
    workouts_completed: int
    goals: DailyGoals = field(default_factory=DailyGoals)

    @property
    def net_calories(self) -> float:
        return self.consumed.calories - self.calories_burned


def summarize_day(
    day: date,
    meal_totals: Iterable[MacroTotals],
    workout_calories: Iterable[int | None],
    water_glasses: int | None,
    goals: DailyGoals,
) -> DaySummary:
    meals = list(meal_totals)
    workouts = list(workout_calories)
    return DaySummary(
        day=day,
        consumed=sum_macros(meals),
        calories_burned=sum(c or 0 for c in workouts),
        water_glasses=water_glasses or 0,
        meals_count=len(meals),
        workouts_completed=len(workouts),
        goals=goals,
    )

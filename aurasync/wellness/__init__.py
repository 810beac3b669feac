"""AuraSync wellness core.

Pure, synchronous computations invoked by the request handlers with data
already read from storage.  Nothing in this package performs I/O or keeps
state between calls.

Modules:
    cycle_predictor: Cycle phase classification, next-period prediction, cycle stats
    streaks        : Current / longest habit streak from completion days
    achievements   : Streak milestones
    journal        : PIN lockout policy and journal entry helpers
    nutrition      : Meal macro totals and the daily fitness summary
"""

from aurasync.wellness.achievements import Milestone, milestone_for_streak
from aurasync.wellness.cycle_predictor import (
    CyclePrediction,
    CyclePredictor,
    CycleStats,
    PeriodRecord,
    PhaseReading,
)
from aurasync.wellness.journal import JournalLockPolicy, LockoutState
from aurasync.wellness.nutrition import DailyGoals, DaySummary, MacroTotals, summarize_day
from aurasync.wellness.streaks import StreakCalculator, StreakSnapshot, compute_streaks

__all__ = [
    "CyclePredictor",
    "CyclePrediction",
    "CycleStats",
    "PeriodRecord",
    "PhaseReading",
    "StreakCalculator",
    "StreakSnapshot",
    "compute_streaks",
    "Milestone",
    "milestone_for_streak",
    "JournalLockPolicy",
    "LockoutState",
    "MacroTotals",
    "DailyGoals",
    "DaySummary",
    "summarize_day",
]

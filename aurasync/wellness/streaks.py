"""Habit streak computation.

A streak is a run of consecutive calendar days with a completion.  The
current streak is only alive if the latest completion is today or
yesterday; the longest streak is the longest run anywhere in the history.

Inputs may mix ``date`` and ``datetime`` values.  Datetimes are truncated
to their calendar day, and duplicate days collapse to one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StreakSnapshot:
    current_streak: int = 0
    longest_streak: int = 0
    last_completion_date: date | None = None


def _as_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _current_streak(days_desc: list[date], today: date) -> int:
    if days_desc[0] not in (today, today - ONE_DAY):
        return 0

    streak = 1
    for newer, older in zip(days_desc, days_desc[1:]):
        if newer - older != ONE_DAY:
            break
        streak += 1
    return streak


def _longest_run(days_desc: list[date]) -> int:
    longest = running = 1
    for newer, older in zip(days_desc, days_desc[1:]):
        running = running + 1 if newer - older == ONE_DAY else 1
        longest = max(longest, running)
    return longest


def compute_streaks(
    completion_dates: Iterable[date | datetime], today: date | datetime
) -> StreakSnapshot:
    """Derive current and longest streaks from a habit's completion days.

    Args:
        completion_dates: Days the habit was marked done.  Not mutated.
        today:            Reference day for deciding whether the latest run
                          is still alive.

    Returns:
        StreakSnapshot with ``longest_streak >= current_streak``.
    """
    days_desc = sorted({_as_day(d) for d in completion_dates}, reverse=True)
    if not days_desc:
        return StreakSnapshot()

    current = _current_streak(days_desc, _as_day(today))
    longest = max(_longest_run(days_desc), current)
    return StreakSnapshot(
        current_streak=current,
        longest_streak=longest,
        last_completion_date=days_desc[0],
    )


class StreakCalculator:
    """Object form of :func:`compute_streaks`."""

    def compute_streaks(
        self, completion_dates: Iterable[date | datetime], today: date | datetime
    ) -> StreakSnapshot:
        return compute_streaks(completion_dates, today)

"""Streak milestones that earn an achievement."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Milestone:
    achievement_type: str
    name: str
    description: str
    streak_days: int


MILESTONES: tuple[Milestone, ...] = (
    Milestone("first_week", "First Week Complete", "7-day streak achieved!", 7),
    Milestone("month_streak", "Month Strong", "30-day streak achieved!", 30),
)


def milestone_for_streak(current_streak: int) -> Milestone | None:
    """Return the milestone reached at exactly ``current_streak`` days, if any.

    Milestones fire on the exact day count only, so a streak that jumps past
    a threshold (e.g. after backfilling an old completion) does not award it.
    """
    for milestone in MILESTONES:
        if milestone.streak_days == current_streak:
            return milestone
    return None

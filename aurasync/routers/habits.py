"""Habit CRUD, daily completions, streaks, and achievements."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any

import asyncpg
from fastapi import APIRouter, HTTPException

from aurasync.dependencies import CurrentUser, Db, Today
from aurasync.models.habits import (
    AchievementList,
    CompletionCreate,
    CompletionResult,
    HabitCreate,
    HabitList,
    HabitRead,
    HabitUpdate,
    UncompleteResult,
)
from aurasync.wellness.achievements import milestone_for_streak
from aurasync.wellness.streaks import StreakCalculator

router = APIRouter(prefix="/habits", tags=["habits"])
logger = logging.getLogger("aurasync.habits")

_calculator = StreakCalculator()


async def _refresh_streak(
    conn: asyncpg.Connection, habit_id: uuid.UUID, today: date
) -> dict[str, Any]:
    """Recompute a habit's streak from its full completion set and store it.

    The stored longest streak never decreases, even when completions are
    removed.
    """
    rows = await conn.fetch(
        "SELECT completion_date FROM habit_completions WHERE habit_id = $1",
        habit_id,
    )
    snapshot = _calculator.compute_streaks((r["completion_date"] for r in rows), today)
    row = await conn.fetchrow(
        """
        INSERT INTO habit_streaks (habit_id, current_streak, longest_streak, last_completion_date)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (habit_id) DO UPDATE SET
            current_streak = EXCLUDED.current_streak,
            longest_streak = GREATEST(habit_streaks.longest_streak, EXCLUDED.longest_streak),
            last_completion_date = EXCLUDED.last_completion_date,
            updated_at = NOW()
        RETURNING habit_id, current_streak, longest_streak, last_completion_date
        """,
        habit_id,
        snapshot.current_streak,
        snapshot.longest_streak,
        snapshot.last_completion_date,
    )
    return dict(row)


async def _award_milestone(
    conn: asyncpg.Connection, user_id: uuid.UUID, current_streak: int
) -> dict[str, Any] | None:
    """Award the milestone reached at ``current_streak``, once per user."""
    milestone = milestone_for_streak(current_streak)
    if milestone is None:
        return None

    row = await conn.fetchrow(
        """
        INSERT INTO user_achievements (
            user_id, achievement_type, achievement_name, achievement_description
        ) VALUES ($1, $2, $3, $4)
        ON CONFLICT (user_id, achievement_type) DO NOTHING
        RETURNING *
        """,
        user_id, milestone.achievement_type, milestone.name, milestone.description,
    )
    if row:
        logger.info("User %s earned achievement %s", user_id, milestone.achievement_type)
    return dict(row) if row else None


async def _ensure_owned(conn: asyncpg.Connection, habit_id: uuid.UUID, user_id: uuid.UUID) -> None:
    owned = await conn.fetchval(
        "SELECT habit_id FROM habits WHERE habit_id = $1 AND user_id = $2",
        habit_id, user_id,
    )
    if not owned:
        raise HTTPException(status_code=404, detail="Habit not found")


# ---------- Habits ----------

@router.get("", response_model=HabitList)
async def list_habits(user: CurrentUser, db: Db, today: Today) -> Any:
    habits = await db.fetch(
        """
        SELECT h.*,
            COALESCE(hs.current_streak, 0) AS current_streak,
            COALESCE(hs.longest_streak, 0) AS longest_streak
        FROM habits h
        LEFT JOIN habit_streaks hs ON h.habit_id = hs.habit_id
        WHERE h.user_id = $1
        ORDER BY h.order_position, h.created_at
        """,
        user.user_id,
    )
    done_today = await db.fetch(
        """
        SELECT habit_id FROM habit_completions
        WHERE habit_id = ANY($1::uuid[]) AND completion_date = $2
        """,
        [h["habit_id"] for h in habits], today,
    )
    return {
        "habits": [dict(h) for h in habits],
        "completions": {str(r["habit_id"]): True for r in done_today},
        "as_of": today,
    }


@router.post("", response_model=HabitRead, status_code=201)
async def create_habit(user: CurrentUser, db: Db, body: HabitCreate) -> Any:
    async with db.transaction() as conn:
        row = await conn.fetchrow(
            """
            INSERT INTO habits (
                user_id, habit_name, description, frequency,
                target_days_per_week, color_hex, icon_name
            ) VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING *
            """,
            user.user_id, body.habit_name, body.description, body.frequency.value,
            body.target_days_per_week, body.color_hex, body.icon_name,
        )
        await conn.execute("INSERT INTO habit_streaks (habit_id) VALUES ($1)", row["habit_id"])
    return dict(row)


@router.get("/achievements", response_model=AchievementList)
async def list_achievements(user: CurrentUser, db: Db) -> Any:
    rows = await db.fetch(
        "SELECT * FROM user_achievements WHERE user_id = $1 ORDER BY earned_at DESC",
        user.user_id,
    )
    achievements = [dict(r) for r in rows]
    return {
        "achievements": achievements,
        "unviewed_count": sum(1 for a in achievements if not a["is_viewed"]),
    }


@router.patch("/{habit_id}", response_model=HabitRead)
async def update_habit(
    habit_id: uuid.UUID, user: CurrentUser, db: Db, body: HabitUpdate
) -> Any:
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    set_clauses = []
    params: list[Any] = [habit_id, user.user_id]
    for i, (key, value) in enumerate(updates.items(), start=3):
        set_clauses.append(f"{key} = ${i}")
        params.append(value)
    set_clauses.append("updated_at = NOW()")

    row = await db.fetchrow(
        f"UPDATE habits SET {', '.join(set_clauses)} WHERE habit_id = $1 AND user_id = $2 RETURNING *",
        *params,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Habit not found")
    return dict(row)


@router.delete("/{habit_id}", status_code=204)
async def delete_habit(habit_id: uuid.UUID, user: CurrentUser, db: Db) -> None:
    result = await db.execute(
        "DELETE FROM habits WHERE habit_id = $1 AND user_id = $2",
        habit_id, user.user_id,
    )
    if result == "DELETE 0":
        raise HTTPException(status_code=404, detail="Habit not found")


# ---------- Completions ----------

@router.post("/{habit_id}/complete", response_model=CompletionResult, status_code=201)
async def complete_habit(
    habit_id: uuid.UUID,
    user: CurrentUser,
    db: Db,
    today: Today,
    body: CompletionCreate | None = None,
) -> Any:
    body = body or CompletionCreate()
    completion_date = body.completion_date or today
    if completion_date > today:
        raise HTTPException(status_code=422, detail="completion_date cannot be in the future")

    async with db.transaction() as conn:
        await _ensure_owned(conn, habit_id, user.user_id)
        completion = await conn.fetchrow(
            """
            INSERT INTO habit_completions (habit_id, completion_date, notes)
            VALUES ($1, $2, $3)
            ON CONFLICT (habit_id, completion_date) DO NOTHING
            RETURNING *
            """,
            habit_id, completion_date, body.notes,
        )
        streak = await _refresh_streak(conn, habit_id, today)
        achievement = await _award_milestone(conn, user.user_id, streak["current_streak"])

    return {
        "completion": dict(completion) if completion else None,
        "streak": streak,
        "achievement_earned": achievement,
    }


@router.delete("/{habit_id}/completions/{completion_date}", response_model=UncompleteResult)
async def uncomplete_habit(
    habit_id: uuid.UUID,
    completion_date: date,
    user: CurrentUser,
    db: Db,
    today: Today,
) -> Any:
    async with db.transaction() as conn:
        await _ensure_owned(conn, habit_id, user.user_id)
        await conn.execute(
            "DELETE FROM habit_completions WHERE habit_id = $1 AND completion_date = $2",
            habit_id, completion_date,
        )
        streak = await _refresh_streak(conn, habit_id, today)
    return {"success": True, "streak": streak}

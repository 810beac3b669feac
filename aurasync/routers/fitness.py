"""Fitness tracking: profile goals, meals, water intake, workouts, daily dashboard."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from aurasync.dependencies import CurrentUser, Db, Today
from aurasync.models.fitness import (
    FitnessDashboard,
    FitnessProfileRead,
    FitnessProfileUpdate,
    MealCreate,
    MealRead,
    WaterLogCreate,
    WaterLogRead,
    WorkoutCreate,
    WorkoutRead,
)
from aurasync.wellness.nutrition import DailyGoals, MacroTotals, sum_macros, summarize_day

router = APIRouter(prefix="/fitness", tags=["fitness"])
logger = logging.getLogger("aurasync.fitness")


def _range_filter(
    column: str, start: datetime | None, end: datetime | None, params: list[Any]
) -> list[str]:
    """Append optional range bounds to ``params`` and return their SQL conditions."""
    conditions = []
    if start:
        params.append(start)
        conditions.append(f"{column} >= ${len(params)}")
    if end:
        params.append(end)
        conditions.append(f"{column} <= ${len(params)}")
    return conditions


# ---------- Profile ----------

@router.get("/profile", response_model=FitnessProfileRead)
async def get_profile(user: CurrentUser, db: Db) -> Any:
    row = await db.fetchrow("SELECT * FROM fitness_profiles WHERE user_id = $1", user.user_id)
    if not row:
        raise HTTPException(status_code=404, detail="Fitness profile not found")
    return dict(row)


@router.put("/profile", response_model=FitnessProfileRead)
async def upsert_profile(user: CurrentUser, db: Db, body: FitnessProfileUpdate) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO fitness_profiles (
            user_id, current_weight_kg, target_weight_kg, height_cm,
            daily_calorie_goal, daily_protein_g, daily_carbs_g, daily_fat_g,
            daily_water_glasses, activity_level
        ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
        ON CONFLICT (user_id) DO UPDATE SET
            current_weight_kg = EXCLUDED.current_weight_kg,
            target_weight_kg = EXCLUDED.target_weight_kg,
            height_cm = EXCLUDED.height_cm,
            daily_calorie_goal = EXCLUDED.daily_calorie_goal,
            daily_protein_g = EXCLUDED.daily_protein_g,
            daily_carbs_g = EXCLUDED.daily_carbs_g,
            daily_fat_g = EXCLUDED.daily_fat_g,
            daily_water_glasses = EXCLUDED.daily_water_glasses,
            activity_level = EXCLUDED.activity_level,
            updated_at = NOW()
        RETURNING *
        """,
        user.user_id, body.current_weight_kg, body.target_weight_kg, body.height_cm,
        body.daily_calorie_goal, body.daily_protein_g, body.daily_carbs_g, body.daily_fat_g,
        body.daily_water_glasses, body.activity_level.value,
    )
    return dict(row)


# ---------- Dashboard ----------

@router.get("/dashboard", response_model=FitnessDashboard)
async def get_dashboard(
    user: CurrentUser,
    db: Db,
    today: Today,
    day: date | None = Query(default=None, alias="date"),
) -> Any:
    """Totals for one day against the profile's goals (defaults when no profile)."""
    day = day or today
    profile = await db.fetchrow(
        "SELECT * FROM fitness_profiles WHERE user_id = $1", user.user_id
    )
    meals = await db.fetch(
        """
        SELECT total_calories, total_protein_g, total_carbs_g, total_fat_g
        FROM meals
        WHERE user_id = $1 AND consumed_at::date = $2
        """,
        user.user_id, day,
    )
    workouts = await db.fetch(
        """
        SELECT total_calories_burned FROM workouts
        WHERE user_id = $1 AND started_at::date = $2
        """,
        user.user_id, day,
    )
    water = await db.fetchval(
        "SELECT COALESCE(SUM(glasses), 0) FROM water_logs WHERE user_id = $1 AND log_date = $2",
        user.user_id, day,
    )

    summary = summarize_day(
        day,
        (
            MacroTotals(
                calories=float(m["total_calories"] or 0),
                protein_g=float(m["total_protein_g"] or 0),
                carbs_g=float(m["total_carbs_g"] or 0),
                fat_g=float(m["total_fat_g"] or 0),
            )
            for m in meals
        ),
        (w["total_calories_burned"] for w in workouts),
        water,
        DailyGoals.from_profile(dict(profile) if profile else None),
    )
    return {
        "day": summary.day,
        "calories_consumed": round(summary.consumed.calories),
        "calories_goal": summary.goals.calories,
        "calories_burned": summary.calories_burned,
        "net_calories": round(summary.net_calories),
        "macros": {
            "protein": round(summary.consumed.protein_g, 1),
            "protein_goal": summary.goals.protein_g,
            "carbs": round(summary.consumed.carbs_g, 1),
            "carbs_goal": summary.goals.carbs_g,
            "fat": round(summary.consumed.fat_g, 1),
            "fat_goal": summary.goals.fat_g,
        },
        "water_intake": summary.water_glasses,
        "water_goal": summary.goals.water_glasses,
        "meals_count": summary.meals_count,
        "workouts_completed": summary.workouts_completed,
    }


# ---------- Meals ----------

@router.post("/meals", response_model=MealRead, status_code=201)
async def create_meal(user: CurrentUser, db: Db, body: MealCreate) -> Any:
    totals = sum_macros(
        MacroTotals(
            calories=item.calories,
            protein_g=item.protein_g,
            carbs_g=item.carbs_g,
            fat_g=item.fat_g,
        )
        for item in body.items
    )
    async with db.transaction() as conn:
        meal = await conn.fetchrow(
            """
            INSERT INTO meals (
                user_id, meal_type, meal_name, consumed_at,
                total_calories, total_protein_g, total_carbs_g, total_fat_g
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
            """,
            user.user_id, body.meal_type.value, body.meal_name,
            body.consumed_at or datetime.now(timezone.utc),
            totals.calories, totals.protein_g, totals.carbs_g, totals.fat_g,
        )
        items = []
        for item in body.items:
            row = await conn.fetchrow(
                """
                INSERT INTO meal_items (
                    meal_id, food_name, serving_size, serving_quantity,
                    calories, protein_g, carbs_g, fat_g, fiber_g, sugar_g, sodium_mg,
                    barcode, is_custom
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13)
                RETURNING *
                """,
                meal["meal_id"], item.food_name, item.serving_size, item.serving_quantity,
                item.calories, item.protein_g, item.carbs_g, item.fat_g,
                item.fiber_g, item.sugar_g, item.sodium_mg, item.barcode, item.is_custom,
            )
            items.append(dict(row))

    logger.info("User %s logged %s with %d items", user.user_id, body.meal_type.value, len(items))
    return {**dict(meal), "items": items}


@router.get("/meals", response_model=list[MealRead])
async def list_meals(
    user: CurrentUser,
    db: Db,
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
) -> Any:
    params: list[Any] = [user.user_id]
    conditions = ["m.user_id = $1", *_range_filter("m.consumed_at", start_date, end_date, params)]
    rows = await db.fetch(
        f"""
        SELECT m.*,
            COALESCE(
                json_agg(to_jsonb(mi.*) ORDER BY mi.food_name) FILTER (WHERE mi.item_id IS NOT NULL),
                '[]'
            ) AS items
        FROM meals m
        LEFT JOIN meal_items mi ON m.meal_id = mi.meal_id
        WHERE {' AND '.join(conditions)}
        GROUP BY m.meal_id
        ORDER BY m.consumed_at DESC
        """,
        *params,
    )
    return [dict(r) for r in rows]


@router.delete("/meals/{meal_id}", status_code=204)
async def delete_meal(meal_id: uuid.UUID, user: CurrentUser, db: Db) -> None:
    result = await db.execute(
        "DELETE FROM meals WHERE meal_id = $1 AND user_id = $2",
        meal_id, user.user_id,
    )
    if result == "DELETE 0":
        raise HTTPException(status_code=404, detail="Meal not found")


# ---------- Water ----------

@router.post("/water", response_model=WaterLogRead, status_code=201)
async def log_water(user: CurrentUser, db: Db, today: Today, body: WaterLogCreate) -> Any:
    if body.logged_at:
        logged_at, log_date = body.logged_at, body.logged_at.date()
    else:
        logged_at, log_date = datetime.now(timezone.utc), today
    row = await db.fetchrow(
        """
        INSERT INTO water_logs (user_id, glasses, logged_at, log_date)
        VALUES ($1, $2, $3, $4)
        RETURNING *
        """,
        user.user_id, body.glasses, logged_at, log_date,
    )
    return dict(row)


# ---------- Workouts ----------

@router.post("/workouts", response_model=WorkoutRead, status_code=201)
async def create_workout(user: CurrentUser, db: Db, body: WorkoutCreate) -> Any:
    calories_burned = sum(ex.calories_burned or 0 for ex in body.exercises)
    async with db.transaction() as conn:
        workout = await conn.fetchrow(
            """
            INSERT INTO workouts (
                user_id, workout_name, workout_type, started_at, completed_at,
                total_calories_burned
            ) VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
            """,
            user.user_id, body.workout_name, body.workout_type,
            body.started_at, body.completed_at, calories_burned,
        )
        exercises = []
        for order, ex in enumerate(body.exercises):
            row = await conn.fetchrow(
                """
                INSERT INTO workout_exercises (
                    workout_id, exercise_name, exercise_order, sets, reps, weight_kg,
                    duration_seconds, distance_km, calories_burned, notes
                ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
                RETURNING *
                """,
                workout["workout_id"], ex.exercise_name, order, ex.sets, ex.reps, ex.weight_kg,
                ex.duration_seconds, ex.distance_km, ex.calories_burned, ex.notes,
            )
            exercises.append(dict(row))
    return {**dict(workout), "exercises": exercises}


@router.get("/workouts", response_model=list[WorkoutRead])
async def list_workouts(
    user: CurrentUser,
    db: Db,
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
) -> Any:
    params: list[Any] = [user.user_id]
    conditions = ["w.user_id = $1", *_range_filter("w.started_at", start_date, end_date, params)]
    rows = await db.fetch(
        f"""
        SELECT w.*,
            COALESCE(
                json_agg(to_jsonb(we.*) ORDER BY we.exercise_order)
                    FILTER (WHERE we.workout_exercise_id IS NOT NULL),
                '[]'
            ) AS exercises
        FROM workouts w
        LEFT JOIN workout_exercises we ON w.workout_id = we.workout_id
        WHERE {' AND '.join(conditions)}
        GROUP BY w.workout_id
        ORDER BY w.started_at DESC
        """,
        *params,
    )
    return [dict(r) for r in rows]

"""Cycle tracking endpoints: periods, predictions, daily logs, insights."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from aurasync.dependencies import CurrentUser, Db, Today
from aurasync.models.cycle import (
    CycleCalendar,
    CycleInsights,
    CycleOverview,
    CycleProfileRead,
    CycleProfileUpdate,
    DailyLogCreate,
    DailyLogRead,
    OvulationTestCreate,
    OvulationTestRead,
    PeriodCreate,
    PeriodLogged,
    PeriodRead,
    PeriodUpdate,
    PredictionSummary,
)
from aurasync.wellness.cycle_predictor import (
    DEFAULT_CYCLE_LENGTH_DAYS,
    CyclePrediction,
    CyclePredictor,
    PeriodRecord,
    compute_cycle_length,
    is_predictable,
)

router = APIRouter(prefix="/cycle", tags=["cycle"])
logger = logging.getLogger("aurasync.cycle")

_predictor = CyclePredictor()


def _prediction_from_row(row: Any) -> CyclePrediction:
    return CyclePrediction(
        predicted_period_start=row["predicted_period_start"],
        predicted_period_end=row["predicted_period_end"],
        predicted_ovulation_start=row["predicted_ovulation_start"],
        predicted_ovulation_end=row["predicted_ovulation_end"],
        confidence_score=float(row["confidence_score"]),
    )


# ---------- Overview / calendar ----------

@router.get("/overview", response_model=CycleOverview)
async def get_overview(user: CurrentUser, db: Db, today: Today) -> Any:
    last_period = await db.fetchrow(
        """
        SELECT * FROM cycle_periods
        WHERE user_id = $1 AND is_confirmed = TRUE
        ORDER BY start_date DESC LIMIT 1
        """,
        user.user_id,
    )
    prediction = await db.fetchrow(
        "SELECT * FROM cycle_predictions WHERE user_id = $1 ORDER BY generated_at DESC LIMIT 1",
        user.user_id,
    )

    reading = _predictor.classify_current_phase(
        last_period["start_date"] if last_period else None, today
    )
    cycle_length = (last_period and last_period["cycle_length_days"]) or DEFAULT_CYCLE_LENGTH_DAYS
    return {
        "current_phase": reading.phase,
        "current_day": reading.day_in_cycle,
        "cycle_length": cycle_length,
        "last_period": dict(last_period) if last_period else None,
        "next_predicted": dict(prediction) if prediction else None,
    }


@router.get("/calendar", response_model=CycleCalendar)
async def get_calendar(
    user: CurrentUser,
    db: Db,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> Any:
    start = start_date or date.min
    end = end_date or date.max
    periods = await db.fetch(
        """
        SELECT * FROM cycle_periods
        WHERE user_id = $1 AND start_date >= $2 AND start_date <= $3
        ORDER BY start_date
        """,
        user.user_id, start, end,
    )
    predictions = await db.fetch(
        """
        SELECT * FROM cycle_predictions
        WHERE user_id = $1 AND predicted_period_start >= $2 AND predicted_period_start <= $3
        ORDER BY predicted_period_start
        """,
        user.user_id, start, end,
    )
    logs = await db.fetch(
        """
        SELECT * FROM cycle_daily_logs
        WHERE user_id = $1 AND log_date >= $2 AND log_date <= $3
        ORDER BY log_date
        """,
        user.user_id, start, end,
    )
    return {
        "periods": [dict(r) for r in periods],
        "predictions": [dict(r) for r in predictions],
        "daily_logs": [dict(r) for r in logs],
    }


# ---------- Periods ----------

@router.post("/periods", response_model=PeriodLogged, status_code=201)
async def log_period(user: CurrentUser, db: Db, body: PeriodCreate) -> Any:
    """Log a period and keep the stored cycle lengths consistent.

    A period inserted between two existing ones also updates the length of
    the period that follows it.  A fresh prediction is stored only when the
    new period is the most recent one; predictions are appended and earlier
    rows are kept as history.
    """
    async with db.transaction() as conn:
        previous_start = await conn.fetchval(
            """
            SELECT start_date FROM cycle_periods
            WHERE user_id = $1 AND start_date < $2
            ORDER BY start_date DESC LIMIT 1
            """,
            user.user_id, body.start_date,
        )
        following = await conn.fetchrow(
            """
            SELECT period_id, start_date FROM cycle_periods
            WHERE user_id = $1 AND start_date > $2
            ORDER BY start_date LIMIT 1
            """,
            user.user_id, body.start_date,
        )
        cycle_length = (
            compute_cycle_length(previous_start, body.start_date) if previous_start else None
        )

        period = await conn.fetchrow(
            """
            INSERT INTO cycle_periods (user_id, start_date, end_date, cycle_length_days, notes, is_confirmed)
            VALUES ($1, $2, $3, $4, $5, TRUE)
            ON CONFLICT (user_id, start_date) DO NOTHING
            RETURNING *
            """,
            user.user_id, body.start_date, body.end_date, cycle_length, body.notes,
        )
        if not period:
            raise HTTPException(
                status_code=409, detail="A period starting on that date is already logged"
            )

        if following:
            await conn.execute(
                "UPDATE cycle_periods SET cycle_length_days = $1 WHERE period_id = $2",
                compute_cycle_length(body.start_date, following["start_date"]),
                following["period_id"],
            )

        prediction_row = None
        if following is None and is_predictable(cycle_length):
            prediction = _predictor.predict(body.start_date, cycle_length)
            prediction_row = await conn.fetchrow(
                """
                INSERT INTO cycle_predictions (
                    user_id, predicted_period_start, predicted_period_end,
                    predicted_ovulation_start, predicted_ovulation_end, confidence_score
                ) VALUES ($1, $2, $3, $4, $5, $6)
                RETURNING *
                """,
                user.user_id,
                prediction.predicted_period_start, prediction.predicted_period_end,
                prediction.predicted_ovulation_start, prediction.predicted_ovulation_end,
                prediction.confidence_score,
            )

    logger.info(
        "Logged period for user %s (cycle_length=%s, backfilled=%s, prediction=%s)",
        user.user_id, cycle_length, following is not None, prediction_row is not None,
    )
    return {
        "period": dict(period),
        "prediction": dict(prediction_row) if prediction_row else None,
    }


@router.get("/periods", response_model=list[PeriodRead])
async def list_periods(
    user: CurrentUser,
    db: Db,
    limit: int = Query(default=24, ge=1, le=240),
) -> Any:
    rows = await db.fetch(
        "SELECT * FROM cycle_periods WHERE user_id = $1 ORDER BY start_date DESC LIMIT $2",
        user.user_id, limit,
    )
    return [dict(r) for r in rows]


@router.patch("/periods/{period_id}", response_model=PeriodRead)
async def update_period(
    period_id: uuid.UUID, user: CurrentUser, db: Db, body: PeriodUpdate
) -> Any:
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    if updates.get("end_date") is not None:
        start = await db.fetchval(
            "SELECT start_date FROM cycle_periods WHERE period_id = $1 AND user_id = $2",
            period_id, user.user_id,
        )
        if start is None:
            raise HTTPException(status_code=404, detail="Period not found")
        if updates["end_date"] < start:
            raise HTTPException(status_code=422, detail="end_date must not be before start_date")

    set_clauses = []
    params: list[Any] = [period_id, user.user_id]
    for i, (key, value) in enumerate(updates.items(), start=3):
        set_clauses.append(f"{key} = ${i}")
        params.append(value)

    row = await db.fetchrow(
        f"""
        UPDATE cycle_periods SET {', '.join(set_clauses)}
        WHERE period_id = $1 AND user_id = $2
        RETURNING *
        """,
        *params,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Period not found")
    return dict(row)


# ---------- Predictions ----------

@router.get("/predictions", response_model=PredictionSummary)
async def get_predictions(user: CurrentUser, db: Db) -> Any:
    row = await db.fetchrow(
        "SELECT * FROM cycle_predictions WHERE user_id = $1 ORDER BY generated_at DESC LIMIT 1",
        user.user_id,
    )
    if not row:
        return PredictionSummary()

    prediction = _prediction_from_row(row)
    return {
        "next_period_date": prediction.predicted_period_start,
        "next_ovulation_date": prediction.predicted_ovulation_start,
        "fertility_window": {
            "start": prediction.fertile_window_start,
            "end": prediction.fertile_window_end,
        },
        "confidence_score": prediction.confidence_score,
    }


# ---------- Daily logs ----------

@router.post("/daily-logs", response_model=DailyLogRead)
async def log_daily_data(
    user: CurrentUser, db: Db, today: Today, body: DailyLogCreate
) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO cycle_daily_logs (
            user_id, log_date, flow_level, symptoms, mood, sexual_activity, notes
        ) VALUES ($1, $2, $3, $4, $5, $6, $7)
        ON CONFLICT (user_id, log_date) DO UPDATE SET
            flow_level = EXCLUDED.flow_level,
            symptoms = EXCLUDED.symptoms,
            mood = EXCLUDED.mood,
            sexual_activity = EXCLUDED.sexual_activity,
            notes = EXCLUDED.notes
        RETURNING *
        """,
        user.user_id,
        body.log_date or today,
        body.flow_level.value if body.flow_level else None,
        body.symptoms, body.mood, body.sexual_activity, body.notes,
    )
    return dict(row)


@router.get("/daily-logs/{log_date}", response_model=DailyLogRead)
async def get_daily_log(log_date: date, user: CurrentUser, db: Db) -> Any:
    row = await db.fetchrow(
        "SELECT * FROM cycle_daily_logs WHERE user_id = $1 AND log_date = $2",
        user.user_id, log_date,
    )
    if not row:
        raise HTTPException(status_code=404, detail="Log not found")
    return dict(row)


@router.post("/ovulation-tests", response_model=OvulationTestRead, status_code=201)
async def log_ovulation_test(user: CurrentUser, db: Db, body: OvulationTestCreate) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO ovulation_tests (user_id, test_date, result, notes)
        VALUES ($1, $2, $3, $4)
        RETURNING *
        """,
        user.user_id, body.test_date, body.result.value, body.notes,
    )
    return dict(row)


# ---------- Insights ----------

@router.get("/insights", response_model=CycleInsights)
async def get_insights(user: CurrentUser, db: Db) -> Any:
    length_rows = await db.fetch(
        """
        SELECT start_date, end_date, cycle_length_days FROM cycle_periods
        WHERE user_id = $1 AND cycle_length_days IS NOT NULL
        ORDER BY start_date DESC
        """,
        user.user_id,
    )
    history = [
        PeriodRecord(
            start_date=r["start_date"],
            end_date=r["end_date"],
            cycle_length_days=r["cycle_length_days"],
        )
        for r in length_rows
    ]
    stats = _predictor.average_cycle_stats(history)

    symptom_rows = await db.fetch(
        """
        SELECT UNNEST(symptoms) AS symptom, COUNT(*) AS count
        FROM cycle_daily_logs
        WHERE user_id = $1 AND symptoms IS NOT NULL
        GROUP BY symptom
        ORDER BY count DESC
        LIMIT 10
        """,
        user.user_id,
    )
    return {
        "average_cycle_length": stats.mean_length_days,
        "cycle_length_variability": stats.std_dev_days,
        "cycles_used": stats.cycles_used,
        "common_symptoms": [dict(r) for r in symptom_rows],
    }


# ---------- Profile ----------

@router.get("/profile", response_model=CycleProfileRead)
async def get_profile(user: CurrentUser, db: Db) -> Any:
    row = await db.fetchrow("SELECT * FROM cycle_profiles WHERE user_id = $1", user.user_id)
    if not row:
        raise HTTPException(status_code=404, detail="Profile not found")
    return dict(row)


@router.put("/profile", response_model=CycleProfileRead)
async def upsert_profile(user: CurrentUser, db: Db, body: CycleProfileUpdate) -> Any:
    row = await db.fetchrow(
        """
        INSERT INTO cycle_profiles (user_id, average_cycle_length, average_period_length, tracking_goal)
        VALUES ($1, $2, $3, $4)
        ON CONFLICT (user_id) DO UPDATE SET
            average_cycle_length = EXCLUDED.average_cycle_length,
            average_period_length = EXCLUDED.average_period_length,
            tracking_goal = EXCLUDED.tracking_goal,
            updated_at = NOW()
        RETURNING *
        """,
        user.user_id, body.average_cycle_length, body.average_period_length, body.tracking_goal,
    )
    return dict(row)

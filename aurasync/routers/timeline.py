"""Health timeline: symptoms, moods, medications, and supplements.

Every log writes a ``health_timeline`` row plus one type-specific detail
row, both in the same transaction.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from aurasync.dependencies import CurrentUser, Db
from aurasync.models.timeline import (
    MedicationCreate,
    MoodCreate,
    SupplementCreate,
    SymptomCreate,
    TimelineEntryRead,
    TimelineEntryType,
    TimelineLogResult,
)
from aurasync.services.database import Database

router = APIRouter(prefix="/timeline", tags=["health timeline"])


async def _log_entry(
    db: Database,
    user_id: uuid.UUID,
    entry_type: TimelineEntryType,
    entry_date: datetime | None,
    detail_sql: str,
    *detail_args: Any,
) -> dict[str, Any]:
    """Insert the timeline row, then the detail row keyed on its entry_id."""
    async with db.transaction() as conn:
        entry = await conn.fetchrow(
            """
            INSERT INTO health_timeline (user_id, entry_type, entry_date)
            VALUES ($1, $2, $3)
            RETURNING *
            """,
            user_id, entry_type.value, entry_date or datetime.now(timezone.utc),
        )
        detail = await conn.fetchrow(detail_sql, entry["entry_id"], *detail_args)
    return {"timeline_entry": dict(entry), "detail": dict(detail)}


@router.get("", response_model=list[TimelineEntryRead])
async def list_timeline(
    user: CurrentUser,
    db: Db,
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    types: str | None = Query(default=None, description="Comma-separated entry types"),
    limit: int = Query(default=100, ge=1, le=500),
) -> Any:
    conditions = ["ht.user_id = $1"]
    params: list[Any] = [user.user_id]
    idx = 2

    if start_date:
        conditions.append(f"ht.entry_date >= ${idx}")
        params.append(start_date)
        idx += 1
    if end_date:
        conditions.append(f"ht.entry_date <= ${idx}")
        params.append(end_date)
        idx += 1
    if types:
        try:
            wanted = [TimelineEntryType(t.strip()).value for t in types.split(",") if t.strip()]
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown entry type: {exc}") from exc
        conditions.append(f"ht.entry_type = ANY(${idx}::text[])")
        params.append(wanted)
        idx += 1

    where = " AND ".join(conditions)
    rows = await db.fetch(
        f"""
        SELECT ht.*,
            CASE ht.entry_type
                WHEN 'symptom' THEN to_jsonb(s.*)
                WHEN 'mood' THEN to_jsonb(m.*)
                WHEN 'medication' THEN to_jsonb(med.*)
                WHEN 'supplement' THEN to_jsonb(sup.*)
            END AS data
        FROM health_timeline ht
        LEFT JOIN symptoms s ON ht.entry_id = s.timeline_entry_id
        LEFT JOIN moods m ON ht.entry_id = m.timeline_entry_id
        LEFT JOIN medications med ON ht.entry_id = med.timeline_entry_id
        LEFT JOIN supplements sup ON ht.entry_id = sup.timeline_entry_id
        WHERE {where}
        ORDER BY ht.entry_date DESC
        LIMIT ${idx}
        """,
        *params, limit,
    )
    return [dict(r) for r in rows]


@router.post("/symptoms", response_model=TimelineLogResult, status_code=201)
async def log_symptom(user: CurrentUser, db: Db, body: SymptomCreate) -> Any:
    return await _log_entry(
        db, user.user_id, TimelineEntryType.symptom, body.entry_date,
        """
        INSERT INTO symptoms (timeline_entry_id, symptom_name, severity, body_part, notes, tags)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING *
        """,
        body.symptom_name, body.severity, body.body_part, body.notes, body.tags,
    )


@router.post("/moods", response_model=TimelineLogResult, status_code=201)
async def log_mood(user: CurrentUser, db: Db, body: MoodCreate) -> Any:
    return await _log_entry(
        db, user.user_id, TimelineEntryType.mood, body.entry_date,
        """
        INSERT INTO moods (timeline_entry_id, mood_rating, mood_descriptor, energy_level, notes)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
        """,
        body.mood_rating, body.mood_descriptor, body.energy_level, body.notes,
    )


@router.post("/medications", response_model=TimelineLogResult, status_code=201)
async def log_medication(user: CurrentUser, db: Db, body: MedicationCreate) -> Any:
    taken_at = body.taken_at or datetime.now(timezone.utc)
    return await _log_entry(
        db, user.user_id, TimelineEntryType.medication, taken_at,
        """
        INSERT INTO medications (timeline_entry_id, medication_name, dosage, taken_at, was_taken, notes)
        VALUES ($1, $2, $3, $4, $5, $6)
        RETURNING *
        """,
        body.medication_name, body.dosage, taken_at, body.was_taken, body.notes,
    )


@router.post("/supplements", response_model=TimelineLogResult, status_code=201)
async def log_supplement(user: CurrentUser, db: Db, body: SupplementCreate) -> Any:
    taken_at = body.taken_at or datetime.now(timezone.utc)
    return await _log_entry(
        db, user.user_id, TimelineEntryType.supplement, taken_at,
        """
        INSERT INTO supplements (timeline_entry_id, supplement_name, dosage, taken_at, was_taken)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING *
        """,
        body.supplement_name, body.dosage, taken_at, body.was_taken,
    )


@router.delete("/{entry_id}", status_code=204)
async def delete_entry(entry_id: uuid.UUID, user: CurrentUser, db: Db) -> None:
    result = await db.execute(
        "DELETE FROM health_timeline WHERE entry_id = $1 AND user_id = $2",
        entry_id, user.user_id,
    )
    if result == "DELETE 0":
        raise HTTPException(status_code=404, detail="Entry not found")

"""Tests for the fitness profile, dashboard, meals, water and workouts."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from fastapi.testclient import TestClient

from aurasync.routers.tests.conftest import CREATED_AT, TEST_DATE, TEST_USER_ID, FakeDatabase

MEAL_ID = uuid.UUID("bbbbbbbb-0000-0000-0000-000000000001")
WORKOUT_ID = uuid.UUID("cccccccc-0000-0000-0000-000000000001")


def profile_row(**extra) -> dict:
    row = {
        "user_id": TEST_USER_ID,
        "current_weight_kg": 70.0,
        "target_weight_kg": 65.0,
        "height_cm": 168.0,
        "daily_calorie_goal": 1800,
        "daily_protein_g": 120,
        "daily_carbs_g": 180,
        "daily_fat_g": 60,
        "daily_water_glasses": 10,
        "activity_level": "active",
        "updated_at": CREATED_AT,
    }
    row.update(extra)
    return row


def meal_row(**extra) -> dict:
    row = {
        "meal_id": MEAL_ID,
        "user_id": TEST_USER_ID,
        "meal_type": "lunch",
        "meal_name": None,
        "consumed_at": CREATED_AT,
        "total_calories": 0,
        "total_protein_g": 0,
        "total_carbs_g": 0,
        "total_fat_g": 0,
    }
    row.update(extra)
    return row


def item_row(food_name: str, **extra) -> dict:
    row = {
        "item_id": uuid.uuid4(),
        "meal_id": MEAL_ID,
        "food_name": food_name,
        "serving_size": None,
        "serving_quantity": 1,
        "calories": 0,
        "protein_g": 0,
        "carbs_g": 0,
        "fat_g": 0,
        "fiber_g": None,
        "sugar_g": None,
        "sodium_mg": None,
        "barcode": None,
        "is_custom": False,
    }
    row.update(extra)
    return row


class TestProfile:
    def test_missing_profile(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.get("/api/v1/fitness/profile", headers=auth_headers)
        assert resp.status_code == 404

    def test_upsert_uses_defaults(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = profile_row(activity_level="moderate")
        resp = client.put(
            "/api/v1/fitness/profile", json={"current_weight_kg": 70}, headers=auth_headers
        )
        assert resp.status_code == 200
        args = fake_db.fetchrow.call_args.args
        assert args[1:3] == (TEST_USER_ID, 70)
        assert args[5:] == (2000, 150, 200, 65, 8, "moderate")

    def test_unknown_activity_level(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.put(
            "/api/v1/fitness/profile", json={"activity_level": "couch"}, headers=auth_headers
        )
        assert resp.status_code == 422


class TestDashboard:
    def test_defaults_without_profile(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchval.return_value = 0
        body = client.get("/api/v1/fitness/dashboard", headers=auth_headers).json()
        assert body["day"] == "2026-02-23"
        assert body["calories_goal"] == 2000
        assert body["water_goal"] == 8
        assert body["meals_count"] == 0
        assert body["net_calories"] == 0
        assert fake_db.fetch.call_args_list[0].args[1:] == (TEST_USER_ID, TEST_DATE)

    def test_sums_meals_workouts_and_water(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = profile_row()
        fake_db.fetch.side_effect = [
            [
                {"total_calories": 550, "total_protein_g": 30.25, "total_carbs_g": 60, "total_fat_g": 18},
                {"total_calories": 700, "total_protein_g": 45, "total_carbs_g": 50, "total_fat_g": None},
            ],
            [{"total_calories_burned": 350}, {"total_calories_burned": None}],
        ]
        fake_db.fetchval.return_value = 6

        body = client.get(
            "/api/v1/fitness/dashboard", params={"date": "2026-02-20"}, headers=auth_headers
        ).json()
        assert body["day"] == "2026-02-20"
        assert body["calories_consumed"] == 1250
        assert body["calories_goal"] == 1800
        assert body["calories_burned"] == 350
        assert body["net_calories"] == 900
        assert body["macros"]["protein"] == 75.2
        assert body["macros"]["fat"] == 18
        assert body["water_intake"] == 6
        assert body["water_goal"] == 10
        assert body["meals_count"] == 2
        assert body["workouts_completed"] == 2
        assert fake_db.fetchval.call_args.args[1:] == (TEST_USER_ID, date(2026, 2, 20))


class TestMeals:
    def test_create_stores_totals_and_items(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.side_effect = [
            meal_row(total_calories=400, total_protein_g=32, total_carbs_g=40, total_fat_g=11),
            item_row("Chicken breast", calories=250, protein_g=30, fat_g=6),
            item_row("Rice", calories=150, protein_g=2, carbs_g=40, fat_g=5),
        ]
        resp = client.post(
            "/api/v1/fitness/meals",
            json={
                "meal_type": "lunch",
                "consumed_at": "2026-02-23T12:30:00Z",
                "items": [
                    {"food_name": "Chicken breast", "calories": 250, "protein_g": 30, "fat_g": 6},
                    {"food_name": "Rice", "calories": 150, "protein_g": 2, "carbs_g": 40, "fat_g": 5},
                ],
            },
            headers=auth_headers,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert [i["food_name"] for i in body["items"]] == ["Chicken breast", "Rice"]

        meal_args = fake_db.fetchrow.call_args_list[0].args
        assert meal_args[2] == "lunch"
        assert meal_args[4] == datetime(2026, 2, 23, 12, 30, tzinfo=timezone.utc)
        assert meal_args[5:] == (400, 32, 40, 11)
        assert fake_db.fetchrow.call_args_list[1].args[1:3] == (MEAL_ID, "Chicken breast")

    def test_meal_needs_items(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        resp = client.post(
            "/api/v1/fitness/meals", json={"meal_type": "snack", "items": []}, headers=auth_headers
        )
        assert resp.status_code == 422
        fake_db.fetchrow.assert_not_awaited()

    def test_negative_calories_rejected(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.post(
            "/api/v1/fitness/meals",
            json={"meal_type": "snack", "items": [{"food_name": "Apple", "calories": -5}]},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    def test_list_with_range(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetch.return_value = [meal_row(items=[item_row("Oats")])]
        resp = client.get(
            "/api/v1/fitness/meals",
            params={"start_date": "2026-02-01T00:00:00Z"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()[0]["items"][0]["food_name"] == "Oats"
        args = fake_db.fetch.call_args.args
        assert "m.consumed_at >= $2" in args[0]
        assert args[1] == TEST_USER_ID

    def test_delete_missing_meal(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.execute.return_value = "DELETE 0"
        resp = client.delete(f"/api/v1/fitness/meals/{MEAL_ID}", headers=auth_headers)
        assert resp.status_code == 404


class TestWater:
    def test_defaults_to_one_glass_today(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = {
            "log_id": uuid.uuid4(),
            "user_id": TEST_USER_ID,
            "glasses": 1,
            "logged_at": CREATED_AT,
            "log_date": TEST_DATE,
        }
        resp = client.post("/api/v1/fitness/water", json={}, headers=auth_headers)
        assert resp.status_code == 201
        args = fake_db.fetchrow.call_args.args
        assert args[2] == 1
        assert args[4] == TEST_DATE

    def test_explicit_time_sets_log_date(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = {
            "log_id": uuid.uuid4(),
            "user_id": TEST_USER_ID,
            "glasses": 2,
            "logged_at": datetime(2026, 2, 21, 8, tzinfo=timezone.utc),
            "log_date": date(2026, 2, 21),
        }
        client.post(
            "/api/v1/fitness/water",
            json={"glasses": 2, "logged_at": "2026-02-21T08:00:00Z"},
            headers=auth_headers,
        )
        assert fake_db.fetchrow.call_args.args[4] == date(2026, 2, 21)

    def test_too_many_glasses(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.post("/api/v1/fitness/water", json={"glasses": 50}, headers=auth_headers)
        assert resp.status_code == 422


class TestWorkouts:
    def test_total_calories_from_exercises(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        started = datetime(2026, 2, 23, 7, tzinfo=timezone.utc)
        fake_db.fetchrow.side_effect = [
            {
                "workout_id": WORKOUT_ID,
                "user_id": TEST_USER_ID,
                "workout_name": "Morning",
                "workout_type": "strength",
                "started_at": started,
                "completed_at": None,
                "total_calories_burned": 180,
            },
            *[
                {
                    "workout_exercise_id": uuid.uuid4(),
                    "workout_id": WORKOUT_ID,
                    "exercise_order": order,
                    "exercise_name": name,
                    "calories_burned": calories,
                }
                for order, (name, calories) in enumerate((("Squat", 120), ("Plank", None), ("Row", 60)))
            ],
        ]
        resp = client.post(
            "/api/v1/fitness/workouts",
            json={
                "workout_name": "Morning",
                "workout_type": "strength",
                "started_at": "2026-02-23T07:00:00Z",
                "exercises": [
                    {"exercise_name": "Squat", "sets": 3, "reps": 10, "calories_burned": 120},
                    {"exercise_name": "Plank", "duration_seconds": 60},
                    {"exercise_name": "Row", "calories_burned": 60},
                ],
            },
            headers=auth_headers,
        )
        assert resp.status_code == 201
        assert [e["exercise_order"] for e in resp.json()["exercises"]] == [0, 1, 2]
        assert fake_db.fetchrow.call_args_list[0].args[-1] == 180
        assert fake_db.fetchrow.call_args_list[2].args[1:4] == (WORKOUT_ID, "Plank", 1)

    def test_completed_before_started(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        resp = client.post(
            "/api/v1/fitness/workouts",
            json={
                "started_at": "2026-02-23T07:00:00Z",
                "completed_at": "2026-02-23T06:00:00Z",
            },
            headers=auth_headers,
        )
        assert resp.status_code == 422
        fake_db.fetchrow.assert_not_awaited()

    def test_requires_auth(self, client: TestClient) -> None:
        resp = client.get("/api/v1/fitness/workouts")
        assert resp.status_code == 401

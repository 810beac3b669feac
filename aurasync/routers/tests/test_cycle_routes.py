"""Tests for the cycle endpoints."""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from aurasync.routers.tests.conftest import CREATED_AT, TEST_DATE, TEST_USER_ID, FakeDatabase


def period_row(start: date, cycle_length: int | None = None, **extra) -> dict:
    row = {
        "period_id": uuid.uuid4(),
        "user_id": TEST_USER_ID,
        "start_date": start,
        "end_date": None,
        "cycle_length_days": cycle_length,
        "is_confirmed": True,
        "notes": None,
        "created_at": CREATED_AT,
    }
    row.update(extra)
    return row


def prediction_row(period_start: date, ovulation_start: date) -> dict:
    return {
        "prediction_id": uuid.uuid4(),
        "user_id": TEST_USER_ID,
        "predicted_period_start": period_start,
        "predicted_period_end": period_start + timedelta(days=5),
        "predicted_ovulation_start": ovulation_start,
        "predicted_ovulation_end": ovulation_start + timedelta(days=2),
        "confidence_score": Decimal("0.85"),
        "generated_at": CREATED_AT,
    }


class TestOverview:
    def test_requires_auth(self, client: TestClient) -> None:
        assert client.get("/api/v1/cycle/overview").status_code == 401

    def test_no_periods_is_unknown(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.side_effect = [None, None]
        resp = client.get("/api/v1/cycle/overview", headers=auth_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["current_phase"] == "unknown"
        assert body["current_day"] == 0
        assert body["cycle_length"] == 28
        assert body["last_period"] is None

    def test_phase_from_last_confirmed_period(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        last = period_row(TEST_DATE - timedelta(days=15), cycle_length=30)
        fake_db.fetchrow.side_effect = [
            last,
            prediction_row(date(2026, 3, 10), date(2026, 2, 24)),
        ]
        body = client.get("/api/v1/cycle/overview", headers=auth_headers).json()
        assert body["current_phase"] == "ovulation"
        assert body["current_day"] == 16
        assert body["cycle_length"] == 30
        assert body["next_predicted"]["predicted_period_start"] == "2026-03-10"


class TestLogPeriod:
    def test_with_previous_period_stores_prediction(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchval.return_value = date(2026, 1, 26)
        fake_db.fetchrow.side_effect = [
            None,
            period_row(TEST_DATE, cycle_length=28),
            prediction_row(date(2026, 3, 23), date(2026, 3, 9)),
        ]

        resp = client.post(
            "/api/v1/cycle/periods",
            json={"start_date": "2026-02-23", "end_date": "2026-02-27"},
            headers=auth_headers,
        )
        assert resp.status_code == 201
        assert resp.json()["prediction"]["predicted_ovulation_start"] == "2026-03-09"

        insert_period_args = fake_db.fetchrow.call_args_list[1].args
        assert insert_period_args[1:5] == (TEST_USER_ID, TEST_DATE, date(2026, 2, 27), 28)

        insert_prediction_args = fake_db.fetchrow.call_args_list[2].args
        assert insert_prediction_args[2:] == (
            date(2026, 3, 23),
            date(2026, 3, 28),
            date(2026, 3, 9),
            date(2026, 3, 11),
            0.85,
        )
        fake_db.execute.assert_not_awaited()

    def test_first_period_has_no_prediction(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchval.return_value = None
        fake_db.fetchrow.side_effect = [None, period_row(TEST_DATE)]

        resp = client.post(
            "/api/v1/cycle/periods", json={"start_date": "2026-02-23"}, headers=auth_headers
        )
        assert resp.status_code == 201
        assert resp.json()["prediction"] is None
        assert fake_db.fetchrow.await_count == 2

    def test_backfill_updates_following_period(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        following_id = uuid.uuid4()
        fake_db.fetchval.return_value = date(2025, 12, 1)
        fake_db.fetchrow.side_effect = [
            {"period_id": following_id, "start_date": date(2026, 2, 1)},
            period_row(date(2026, 1, 1), cycle_length=31),
        ]

        resp = client.post(
            "/api/v1/cycle/periods", json={"start_date": "2026-01-01"}, headers=auth_headers
        )
        assert resp.status_code == 201
        assert resp.json()["prediction"] is None

        assert fake_db.fetchrow.call_args_list[1].args[4] == 31
        assert fake_db.execute.call_args.args[1:] == (31, following_id)
        # no prediction insert: a backfilled period is never the latest
        assert fake_db.fetchrow.await_count == 2

    def test_backfill_before_first_period(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        following_id = uuid.uuid4()
        fake_db.fetchrow.side_effect = [
            {"period_id": following_id, "start_date": date(2026, 2, 1)},
            period_row(date(2026, 1, 4)),
        ]

        resp = client.post(
            "/api/v1/cycle/periods", json={"start_date": "2026-01-04"}, headers=auth_headers
        )
        assert resp.status_code == 201
        assert fake_db.fetchrow.call_args_list[1].args[4] is None
        assert fake_db.execute.call_args.args[1:] == (28, following_id)

    def test_duplicate_start_date_conflicts(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchval.return_value = date(2026, 1, 26)
        # insert hits ON CONFLICT DO NOTHING and returns no row
        fake_db.fetchrow.side_effect = [None, None]

        resp = client.post(
            "/api/v1/cycle/periods", json={"start_date": "2026-02-23"}, headers=auth_headers
        )
        assert resp.status_code == 409
        assert fake_db.fetchrow.await_count == 2
        fake_db.execute.assert_not_awaited()

    def test_end_before_start_rejected(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.post(
            "/api/v1/cycle/periods",
            json={"start_date": "2026-02-23", "end_date": "2026-02-20"},
            headers=auth_headers,
        )
        assert resp.status_code == 422


class TestUpdatePeriod:
    def test_empty_update_rejected(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.patch(f"/api/v1/cycle/periods/{uuid.uuid4()}", json={}, headers=auth_headers)
        assert resp.status_code == 400

    def test_end_before_stored_start_rejected(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchval.return_value = date(2026, 2, 10)
        resp = client.patch(
            f"/api/v1/cycle/periods/{uuid.uuid4()}",
            json={"end_date": "2026-02-01"},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    def test_null_confirmed_flag_rejected(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        resp = client.patch(
            f"/api/v1/cycle/periods/{uuid.uuid4()}",
            json={"is_confirmed": None},
            headers=auth_headers,
        )
        assert resp.status_code == 422
        fake_db.fetchrow.assert_not_awaited()

    def test_unknown_period(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = None
        resp = client.patch(
            f"/api/v1/cycle/periods/{uuid.uuid4()}",
            json={"is_confirmed": False},
            headers=auth_headers,
        )
        assert resp.status_code == 404


class TestPredictionsAndInsights:
    def test_no_prediction_returns_nulls(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        body = client.get("/api/v1/cycle/predictions", headers=auth_headers).json()
        assert body["next_period_date"] is None
        assert body["fertility_window"] is None

    def test_fertility_window_from_latest_prediction(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = prediction_row(date(2024, 1, 29), date(2024, 1, 15))
        body = client.get("/api/v1/cycle/predictions", headers=auth_headers).json()
        assert body["next_period_date"] == "2024-01-29"
        assert body["next_ovulation_date"] == "2024-01-15"
        assert body["fertility_window"] == {"start": "2024-01-10", "end": "2024-01-16"}
        assert body["confidence_score"] == 0.85

    def test_insights_use_sample_stddev(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetch.side_effect = [
            [
                {"start_date": date(2026, 1, 28), "end_date": None, "cycle_length_days": 26},
                {"start_date": date(2026, 1, 2), "end_date": None, "cycle_length_days": 30},
                {"start_date": date(2025, 12, 3), "end_date": None, "cycle_length_days": 28},
            ],
            [{"symptom": "cramps", "count": 4}, {"symptom": "fatigue", "count": 2}],
        ]
        body = client.get("/api/v1/cycle/insights", headers=auth_headers).json()
        assert body["average_cycle_length"] == 28.0
        assert body["cycle_length_variability"] == 2.0
        assert body["cycles_used"] == 3
        assert body["common_symptoms"][0] == {"symptom": "cramps", "count": 4}

    def test_insights_single_cycle_absent(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetch.side_effect = [
            [{"start_date": date(2026, 1, 28), "end_date": None, "cycle_length_days": 26}],
            [],
        ]
        body = client.get("/api/v1/cycle/insights", headers=auth_headers).json()
        assert body["average_cycle_length"] is None
        assert body["cycle_length_variability"] is None


class TestDailyLogs:
    def test_defaults_to_today(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = {
            "log_id": uuid.uuid4(),
            "user_id": TEST_USER_ID,
            "log_date": TEST_DATE,
            "flow_level": "light",
            "symptoms": ["cramps"],
            "mood": None,
            "sexual_activity": False,
            "notes": None,
        }
        resp = client.post(
            "/api/v1/cycle/daily-logs",
            json={"flow_level": "light", "symptoms": ["cramps"]},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert fake_db.fetchrow.call_args.args[2] == TEST_DATE

    def test_missing_log(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        resp = client.get("/api/v1/cycle/daily-logs/2026-02-01", headers=auth_headers)
        assert resp.status_code == 404


class TestCalendarAndProfile:
    def test_calendar_groups_rows(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetch.side_effect = [
            [period_row(date(2026, 2, 1), cycle_length=28)],
            [prediction_row(date(2026, 3, 1), date(2026, 2, 15))],
            [],
        ]
        resp = client.get(
            "/api/v1/cycle/calendar",
            params={"start_date": "2026-02-01", "end_date": "2026-03-31"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["periods"]) == 1
        assert body["predictions"][0]["predicted_period_start"] == "2026-03-01"
        assert body["daily_logs"] == []
        assert fake_db.fetch.call_args_list[0].args[2:] == (date(2026, 2, 1), date(2026, 3, 31))

    def test_profile_bounds(self, client: TestClient, auth_headers: dict) -> None:
        resp = client.put(
            "/api/v1/cycle/profile", json={"average_cycle_length": 10}, headers=auth_headers
        )
        assert resp.status_code == 422

    def test_profile_upsert(
        self, client: TestClient, fake_db: FakeDatabase, auth_headers: dict
    ) -> None:
        fake_db.fetchrow.return_value = {
            "user_id": TEST_USER_ID,
            "average_cycle_length": 30,
            "average_period_length": 4,
            "tracking_goal": "conceive",
            "updated_at": None,
        }
        resp = client.put(
            "/api/v1/cycle/profile",
            json={"average_cycle_length": 30, "average_period_length": 4, "tracking_goal": "conceive"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["average_cycle_length"] == 30

"""Shared fixtures for the wellness core tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from aurasync.wellness.cycle_predictor import CyclePredictor, PeriodRecord
from aurasync.wellness.streaks import StreakCalculator

# Canonical reference day
TEST_DATE = date(2026, 2, 23)


def days_ago(n: int, today: date = TEST_DATE) -> date:
    return today - timedelta(days=n)


@pytest.fixture
def predictor() -> CyclePredictor:
    return CyclePredictor()


@pytest.fixture
def calculator() -> StreakCalculator:
    return StreakCalculator()


@pytest.fixture
def period_history() -> list[PeriodRecord]:
    """Four logged periods, most recent first.  The oldest has no length."""
    return [
        PeriodRecord(start_date=date(2026, 1, 28), end_date=date(2026, 2, 1), cycle_length_days=26),
        PeriodRecord(start_date=date(2026, 1, 2), end_date=date(2026, 1, 6), cycle_length_days=30),
        PeriodRecord(start_date=date(2025, 12, 3), end_date=date(2025, 12, 8), cycle_length_days=28),
        PeriodRecord(start_date=date(2025, 11, 5), end_date=date(2025, 11, 10)),
    ]

"""Menstrual cycle phase classification and calendar prediction.

Predictions are calendar-only: the next period is projected from the most
recent period start and a single cycle length.  The fixed period duration,
luteal length and confidence score are literal constants; they are not
derived from the user's history.

All functions are pure.  Period history is never mutated, and predictions
are returned for the caller to persist (each one as a new history row).
"""

from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable

logger = logging.getLogger("aurasync.wellness.cycle_predictor")

PERIOD_LENGTH_DAYS = 5
LUTEAL_PHASE_DAYS = 14
OVULATION_WINDOW_DAYS = 2
CONFIDENCE_SCORE = 0.85
DEFAULT_CYCLE_LENGTH_DAYS = 28

# Fertility window relative to the predicted ovulation day
FERTILE_DAYS_BEFORE_OVULATION = 5
FERTILE_DAYS_AFTER_OVULATION = 1

PHASE_UNKNOWN = "unknown"
PHASE_MENSTRUAL = "menstrual"
PHASE_FOLLICULAR = "follicular"
PHASE_OVULATION = "ovulation"
PHASE_LUTEAL = "luteal"


@dataclass(frozen=True)
class PeriodRecord:
    """A logged period, as read from storage.

    Attributes:
        start_date:        First day of bleeding.
        end_date:          Last day of bleeding, if logged.
        cycle_length_days: Days since the preceding period's start, if there
                           was one.
    """

    start_date: date
    end_date: date | None = None
    cycle_length_days: int | None = None


@dataclass(frozen=True)
class CyclePrediction:
    """Projected next period and ovulation window."""

    predicted_period_start: date
    predicted_period_end: date
    predicted_ovulation_start: date
    predicted_ovulation_end: date
    confidence_score: float = CONFIDENCE_SCORE

    @property
    def fertile_window_start(self) -> date:
        return self.predicted_ovulation_start - timedelta(days=FERTILE_DAYS_BEFORE_OVULATION)

    @property
    def fertile_window_end(self) -> date:
        return self.predicted_ovulation_start + timedelta(days=FERTILE_DAYS_AFTER_OVULATION)


@dataclass(frozen=True)
class PhaseReading:
    phase: str
    day_in_cycle: int


@dataclass(frozen=True)
class CycleStats:
    """Aggregate cycle-length statistics.  Both fields are None below two samples."""

    mean_length_days: float | None = None
    std_dev_days: float | None = None
    cycles_used: int = 0


def cycle_day_from_start(period_start: date, query_date: date) -> int:
    """Return the 1-indexed cycle day of ``query_date``.

    Dates before ``period_start`` give zero or negative numbers.
    """
    return (query_date - period_start).days + 1


def compute_cycle_length(previous_start: date, new_start: date) -> int:
    """Whole days between two consecutive period starts."""
    return (new_start - previous_start).days


def is_predictable(cycle_length_days: int | None) -> bool:
    """True when a cycle length is usable as input to :func:`predict`."""
    return cycle_length_days is not None and cycle_length_days > 0


def phase_for_days_since_start(days_since_start: int) -> str:
    if days_since_start <= 5:
        return PHASE_MENSTRUAL
    if days_since_start <= 13:
        return PHASE_FOLLICULAR
    if days_since_start <= 16:
        return PHASE_OVULATION
    return PHASE_LUTEAL


def classify_current_phase(
    last_confirmed_period_start: date | None, today: date
) -> PhaseReading:
    """Classify ``today`` relative to the last confirmed period start.

    A period start in the future gives a negative offset, which lands in
    the menstrual bucket.
    """
    if last_confirmed_period_start is None:
        return PhaseReading(phase=PHASE_UNKNOWN, day_in_cycle=0)

    day_in_cycle = cycle_day_from_start(last_confirmed_period_start, today)
    return PhaseReading(
        phase=phase_for_days_since_start(day_in_cycle - 1),
        day_in_cycle=day_in_cycle,
    )


def predict(last_period_start: date, cycle_length_days: int) -> CyclePrediction:
    """Project the next period and ovulation window.

    Callers must check :func:`is_predictable` first; no validation is done
    here, so a non-positive length yields dates consistent with the
    arithmetic rather than an error.
    """
    period_start = last_period_start + timedelta(days=cycle_length_days)
    ovulation_start = period_start - timedelta(days=LUTEAL_PHASE_DAYS)
    return CyclePrediction(
        predicted_period_start=period_start,
        predicted_period_end=period_start + timedelta(days=PERIOD_LENGTH_DAYS),
        predicted_ovulation_start=ovulation_start,
        predicted_ovulation_end=ovulation_start + timedelta(days=OVULATION_WINDOW_DAYS),
        confidence_score=CONFIDENCE_SCORE,
    )


def average_cycle_stats(history: Iterable[PeriodRecord]) -> CycleStats:
    """Mean and sample standard deviation of the recorded cycle lengths."""
    lengths = [r.cycle_length_days for r in history if r.cycle_length_days is not None]
    if len(lengths) < 2:
        return CycleStats(cycles_used=len(lengths))

    return CycleStats(
        mean_length_days=float(statistics.mean(lengths)),
        std_dev_days=statistics.stdev(lengths),
        cycles_used=len(lengths),
    )


class CyclePredictor:
    """Facade over the cycle functions for request handlers.

    Usage::

        predictor = CyclePredictor()
        reading = predictor.classify_current_phase(last_start, date.today())
        if is_predictable(length):
            prediction = predictor.predict(last_start, length)
    """

    def classify_current_phase(
        self, last_confirmed_period_start: date | None, today: date
    ) -> PhaseReading:
        return classify_current_phase(last_confirmed_period_start, today)

    def predict(self, last_period_start: date, cycle_length_days: int) -> CyclePrediction:
        prediction = predict(last_period_start, cycle_length_days)
        logger.debug(
            "Predicted next period %s from start %s (length=%d)",
            prediction.predicted_period_start,
            last_period_start,
            cycle_length_days,
        )
        return prediction

    def average_cycle_stats(self, history: Iterable[PeriodRecord]) -> CycleStats:
        return average_cycle_stats(history)

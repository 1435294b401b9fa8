"""ROI calculator tests — monthly occurrences, hours saved, monthly value."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from readiness.schemas.task_schema import Frequency
from readiness.services.roi_calculator import (
    estimate_monthly_time_saved,
    estimate_monthly_value,
    estimate_roi,
    monthly_occurrences,
)


class TestMonthlyOccurrences:
    @pytest.mark.parametrize(
        "frequency, expected",
        [
            (Frequency.MANY_TIMES_DAILY, 1100),
            (Frequency.DAILY_HIGH, 660),
            (Frequency.WEEKLY_MULTIPLE, 12),
            (Frequency.WEEKLY, 4),
            (Frequency.MONTHLY_OR_LESS, 1),
        ],
    )
    def test_table(self, frequency, expected):
        assert monthly_occurrences(frequency) == expected

    def test_unknown_defaults_to_weekly(self):
        assert monthly_occurrences("fortnightly") == 4


class TestTimeSaved:
    def test_hours_saved(self):
        # 1100 × 10 min × 0.87 / 60
        assert estimate_monthly_time_saved(10, Frequency.MANY_TIMES_DAILY, 87) == pytest.approx(159.5)

    def test_zero_score_saves_nothing(self):
        assert estimate_monthly_time_saved(30, Frequency.WEEKLY, 0) == 0


class TestMonthlyValue:
    def test_value_at_rate(self):
        assert estimate_monthly_value(10, Frequency.MANY_TIMES_DAILY, 87, 20.0) == pytest.approx(3190.0)

    @pytest.mark.parametrize("rate", [None, 0, -5])
    def test_missing_or_non_positive_rate(self, rate):
        assert estimate_monthly_value(10, Frequency.MANY_TIMES_DAILY, 87, rate) == 0

    def test_estimate_roi_bundle(self):
        roi = estimate_roi(60, Frequency.WEEKLY, 50, hourly_rate=40.0)
        assert roi.monthly_occurrences == 4
        assert roi.monthly_hours_saved == pytest.approx(2.0)
        assert roi.monthly_value == pytest.approx(80.0)

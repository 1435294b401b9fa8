"""Deterministic ROI estimates for automating a task.

time saved (h/month) = occurrences/month × minutes/task × score/100 ÷ 60
value ($/month)      = time saved × hourly rate

The composite score doubles as the share of each occurrence that
automation is expected to remove.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..constants import DEFAULT_MONTHLY_OCCURRENCES, MONTHLY_OCCURRENCES


@dataclass
class ROIEstimate:
    """Output of the ROI calculation for a single task."""

    monthly_occurrences: int
    monthly_hours_saved: float
    monthly_value: float


def monthly_occurrences(frequency: object) -> int:
    """Approximate occurrences per month. Unknown frequency -> 4."""
    key = getattr(frequency, "value", frequency)
    return MONTHLY_OCCURRENCES.get(key, DEFAULT_MONTHLY_OCCURRENCES)


def estimate_monthly_time_saved(time_per_task: int, frequency: object, final_score: int) -> float:
    """Estimated hours saved per month."""
    saved_minutes = monthly_occurrences(frequency) * time_per_task * (final_score / 100)
    return saved_minutes / 60


def estimate_monthly_value(
    time_per_task: int,
    frequency: object,
    final_score: int,
    hourly_rate: Optional[float],
) -> float:
    """Estimated monthly value from automating the task.

    Returns 0 when *hourly_rate* is missing or not positive.
    """
    if hourly_rate is None or hourly_rate <= 0:
        return 0.0
    return estimate_monthly_time_saved(time_per_task, frequency, final_score) * hourly_rate


def estimate_roi(
    time_per_task: int,
    frequency: object,
    final_score: int,
    hourly_rate: Optional[float] = None,
) -> ROIEstimate:
    return ROIEstimate(
        monthly_occurrences=monthly_occurrences(frequency),
        monthly_hours_saved=estimate_monthly_time_saved(time_per_task, frequency, final_score),
        monthly_value=estimate_monthly_value(time_per_task, frequency, final_score, hourly_rate),
    )

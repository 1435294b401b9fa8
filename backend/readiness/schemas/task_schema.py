from enum import Enum
from typing import List
from uuid import uuid4

from pydantic import BaseModel, Field


class Frequency(str, Enum):
    """How often a task is performed, most frequent first."""

    MANY_TIMES_DAILY = "many_times_daily"
    DAILY_HIGH = "daily_high"
    WEEKLY_MULTIPLE = "weekly_multiple"
    WEEKLY = "weekly"
    MONTHLY_OR_LESS = "monthly_or_less"


class TaskInput(BaseModel):
    """A single business task submitted through the intake form.

    ``inputs`` / ``outputs`` are free strings kept exactly as given (a blank
    entry still counts as an unrecognized data source), normally picked from
    ``DATA_INPUT_OPTIONS`` / ``DATA_OUTPUT_OPTIONS`` in ``constants``.
    A new score is derived whenever any of these fields change.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        max_length=64,
        description="Client-supplied or generated task identifier",
    )
    name: str = Field(..., min_length=1, max_length=255)
    department: str = Field(default="Other", max_length=255)
    description: str = Field(
        default="",
        max_length=5000,
        description="Free-text description of what the task involves.",
    )
    frequency: Frequency
    time_per_task: int = Field(..., gt=0, description="Minutes per occurrence")
    inputs: List[str] = Field(default_factory=list)
    outputs: List[str] = Field(default_factory=list)

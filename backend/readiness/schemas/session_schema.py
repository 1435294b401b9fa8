"""Pydantic schemas for assessment-session API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .score_schema import ScoringWeights, TaskScore
from .task_schema import TaskInput


class SessionCreate(BaseModel):
    """Body of ``POST /sessions``. Name defaults to ``Assessment N``."""

    name: Optional[str] = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def blank_name_is_default(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()


class SessionRename(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class SessionMeta(BaseModel):
    """Lightweight listing entry for a session."""

    id: str
    name: str
    created_at: datetime


class SessionSettings(BaseModel):
    """Scoring weights and ROI hourly rate for a session."""

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    hourly_rate: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="Hourly rate for ROI estimates. NULL disables value estimates.",
    )


class SettingsUpdate(BaseModel):
    """Partial settings update. Missing weight keys keep their defaults."""

    weights: Optional[ScoringWeights] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0.0)
    clear_hourly_rate: bool = Field(
        default=False,
        description="Unset the hourly rate (hourly_rate=null alone means 'unchanged')",
    )
    rescore: bool = Field(
        default=False,
        description="Re-score every task in the session with the new weights",
    )


class AssessmentSessionRecord(BaseModel):
    """Full session — returned by most session endpoints."""

    id: str
    name: str
    token: str
    created_at: datetime
    settings: SessionSettings
    tasks: List[TaskInput] = Field(default_factory=list)
    scores: Dict[str, TaskScore] = Field(
        default_factory=dict,
        description="Scores keyed by task id",
    )


class SessionListResponse(BaseModel):
    records: List[SessionMeta] = Field(
        default_factory=list, description="Sessions sorted by created_at ASC"
    )


class TaskROI(BaseModel):
    task_id: str
    monthly_occurrences: int
    monthly_hours_saved: float
    monthly_value: float


class SessionSummary(BaseModel):
    """Aggregate stats for a session's scored tasks."""

    total: int
    fully: int
    partially: int
    not_suitable: int
    total_time_saved: float = Field(..., description="Monthly hours saved, all tasks")
    potential_savings: float = Field(
        ...,
        description="Monthly value at the hourly rate, or score × 15 when no rate is set",
    )
    hourly_rate: Optional[float] = None
    per_task: List[TaskROI] = Field(default_factory=list)

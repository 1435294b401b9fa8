from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..constants import DEFAULT_WEIGHTS
from .task_schema import TaskInput


class AutomationCategory(str, Enum):
    """Three-way bucket derived from the composite score."""

    FULLY_AUTOMATABLE = "fully"
    PARTIALLY_AUTOMATABLE = "partially"
    NOT_SUITABLE = "not_suitable"


class CriteriaScores(BaseModel):
    """Five 1-5 criteria sub-scores produced by the Scoring Engine."""

    frequency: int = Field(..., ge=1, le=5)
    repetitiveness: int = Field(..., ge=1, le=5)
    data_dependency: int = Field(..., ge=1, le=5)
    decision_variability: int = Field(..., ge=1, le=5)
    complexity: int = Field(..., ge=1, le=5)


class ScoringWeights(BaseModel):
    """Per-criterion weights for the composite score.

    Weights are NOT required to sum to 1.0. The composite divides the
    weighted sum by 5 (the max criterion value), so weights summing to
    less than 1.0 scale the composite down proportionally.
    """

    frequency: float = Field(default=DEFAULT_WEIGHTS["frequency"], ge=0.0, allow_inf_nan=False)
    repetitiveness: float = Field(default=DEFAULT_WEIGHTS["repetitiveness"], ge=0.0, allow_inf_nan=False)
    data_dependency: float = Field(default=DEFAULT_WEIGHTS["data_dependency"], ge=0.0, allow_inf_nan=False)
    decision_variability: float = Field(
        default=DEFAULT_WEIGHTS["decision_variability"], ge=0.0, allow_inf_nan=False
    )
    complexity: float = Field(default=DEFAULT_WEIGHTS["complexity"], ge=0.0, allow_inf_nan=False)


class ToolSuggestion(BaseModel):
    """A recommended automation tool for a task."""

    category: str
    name: str
    explanation: str = ""


class TaskScore(BaseModel):
    """Full scoring result for one task.

    ``reasoning``, ``automation_advice`` and ``suggested_tools`` start out
    rule-based and may later be overwritten by the AI enhancement without
    re-running the base score.
    """

    task_id: str
    criteria_scores: CriteriaScores
    final_score: int = Field(..., ge=0, le=100)
    category: AutomationCategory
    reasoning: str = ""
    automation_advice: str = ""
    suggested_tools: List[ToolSuggestion] = Field(default_factory=list)


class ScoreRequest(BaseModel):
    """Body of the stateless ``POST /score`` endpoint."""

    task: TaskInput
    weights: Optional[ScoringWeights] = None
    normalize_weights: bool = Field(
        default=False,
        description="Divide weights by their sum before aggregating",
    )


class ScoreInsightUpdate(BaseModel):
    """Overwrite of the enrichment fields on a stored score."""

    reasoning: str
    automation_advice: str = ""
    suggested_tools: List[ToolSuggestion] = Field(default_factory=list)

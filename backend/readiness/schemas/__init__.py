# Schemas package
from .task_schema import Frequency, TaskInput
from .score_schema import (
    AutomationCategory,
    CriteriaScores,
    ScoreInsightUpdate,
    ScoreRequest,
    ScoringWeights,
    TaskScore,
    ToolSuggestion,
)
from .session_schema import (
    AssessmentSessionRecord,
    SessionCreate,
    SessionListResponse,
    SessionMeta,
    SessionRename,
    SessionSettings,
    SessionSummary,
    SettingsUpdate,
)
from .enhancement_schema import AIEnhancement

__all__ = [
    "Frequency",
    "TaskInput",
    "AutomationCategory",
    "CriteriaScores",
    "ScoreInsightUpdate",
    "ScoreRequest",
    "ScoringWeights",
    "TaskScore",
    "ToolSuggestion",
    "AssessmentSessionRecord",
    "SessionCreate",
    "SessionListResponse",
    "SessionMeta",
    "SessionRename",
    "SessionSettings",
    "SessionSummary",
    "SettingsUpdate",
    "AIEnhancement",
]

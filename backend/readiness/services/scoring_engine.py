"""Deterministic Scoring Engine.

Converts a task description and its structured metadata into five 1-5
criteria sub-scores, a weighted 0-100 composite, a category, a canned
rationale and a rule-based list of tool suggestions.

Rules
-----
- NO API calls
- NO DB writes
- NO LLMs
- Keyword matching is case-insensitive SUBSTRING containment, not
  word-boundary matching ("if" matches inside "different")
- Never raises for any task the schema admits
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from ..constants import (
    FULLY_AUTOMATABLE_THRESHOLD,
    PARTIALLY_AUTOMATABLE_THRESHOLD,
)
from ..schemas.score_schema import (
    AutomationCategory,
    CriteriaScores,
    ScoringWeights,
    TaskScore,
    ToolSuggestion,
)
from ..schemas.task_schema import Frequency, TaskInput

# ── Keyword tables ──────────────────────────────────────────────────────

_FREQUENCY_SCORES: dict[str, int] = {
    Frequency.MANY_TIMES_DAILY.value: 5,
    Frequency.DAILY_HIGH.value: 4,
    Frequency.WEEKLY_MULTIPLE.value: 3,
    Frequency.WEEKLY.value: 2,
    Frequency.MONTHLY_OR_LESS.value: 1,
}
_NEUTRAL_SCORE = 3

_HIGH_REPETITION_SIGNALS = (
    "same", "identical", "always", "routine",
    "standard", "template", "copy", "repeat",
)
_LOW_REPETITION_SIGNALS = (
    "different", "varies", "custom", "creative",
    "unique", "case by case", "strategic", "negotiate",
)

_STRUCTURED_DATA = ("excel", "spreadsheet", "database", "api", "crm", "web forms")
_SEMI_DIGITAL_DATA = ("email", "pdf")
_ANALOG_DATA = ("paper", "physical", "phone", "verbal")

_RULE_SIGNALS = ("if", "when", "automatic", "always", "rule", "fixed")
_JUDGMENT_SIGNALS = (
    "decide", "evaluate", "consider", "judge",
    "analysis", "thinking", "review",
)

_ACTION_VERBS = (
    "check", "send", "update", "create", "review",
    "approve", "process", "enter", "calculate", "generate",
)

_RATIONALE: dict[AutomationCategory, str] = {
    AutomationCategory.FULLY_AUTOMATABLE: (
        "High frequency and consistent patterns make this ideal for full automation."
    ),
    AutomationCategory.PARTIALLY_AUTOMATABLE: (
        "Automation can handle the repetitive parts, but human review is likely needed."
    ),
    AutomationCategory.NOT_SUITABLE: (
        "Requires significant human judgment or deals with unstructured physical tasks."
    ),
}


# ── Helpers ─────────────────────────────────────────────────────────────

def _clamp(value: int, lo: int = 1, hi: int = 5) -> int:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


def _round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(k in text for k in keywords)


def _signal_score(text: str, raising: Iterable[str], lowering: Iterable[str]) -> int:
    """Baseline 3, +1 on any raising keyword, -1 on any lowering keyword."""
    score = _NEUTRAL_SCORE
    if _contains_any(text, raising):
        score += 1
    if _contains_any(text, lowering):
        score -= 1
    return _clamp(score)


# ── Sub-scorers ─────────────────────────────────────────────────────────

def score_frequency(frequency: object) -> int:
    """Map a frequency value to 5..1 (most frequent highest). Unknown -> 3."""
    key = getattr(frequency, "value", frequency)
    if not isinstance(key, str):
        return _NEUTRAL_SCORE
    return _FREQUENCY_SCORES.get(key, _NEUTRAL_SCORE)


def score_repetitiveness(description: Optional[str]) -> int:
    return _signal_score(
        (description or "").lower(),
        _HIGH_REPETITION_SIGNALS,
        _LOW_REPETITION_SIGNALS,
    )


def _data_points(item: str) -> float:
    if _contains_any(item, _STRUCTURED_DATA):
        return 5.0
    if _contains_any(item, _SEMI_DIGITAL_DATA):
        return 3.5
    if _contains_any(item, _ANALOG_DATA):
        return 1.0
    return 3.0


def score_data_dependency(inputs: Optional[List[str]], outputs: Optional[List[str]]) -> int:
    """Average structured-ness of every declared input and output.

    Structured digital sources score 5, semi-digital 3.5, analog 1 and
    anything unrecognized 3. No data at all -> 3.
    """
    items = [d.lower() for d in [*(inputs or []), *(outputs or [])]]
    if not items:
        return _NEUTRAL_SCORE
    points = sum(_data_points(item) for item in items)
    return _clamp(_round_half_up(points / len(items)))


def score_decision_variability(description: Optional[str]) -> int:
    return _signal_score(
        (description or "").lower(),
        _RULE_SIGNALS,
        _JUDGMENT_SIGNALS,
    )


def score_complexity(description: Optional[str]) -> int:
    """Fewer distinct action verbs means fewer steps, so a higher score."""
    text = (description or "").lower()
    verb_count = sum(1 for verb in _ACTION_VERBS if verb in text)
    if verb_count <= 1:
        return 5
    if verb_count <= 3:
        return 4
    if verb_count <= 5:
        return 3
    return 2


# ── Aggregation ─────────────────────────────────────────────────────────

def compute_criteria(task: TaskInput) -> CriteriaScores:
    return CriteriaScores(
        frequency=score_frequency(task.frequency),
        repetitiveness=score_repetitiveness(task.description),
        data_dependency=score_data_dependency(task.inputs, task.outputs),
        decision_variability=score_decision_variability(task.description),
        complexity=score_complexity(task.description),
    )


def _resolve_weights(weights: Optional[ScoringWeights], normalize: bool) -> ScoringWeights:
    resolved = weights or ScoringWeights()
    if not normalize:
        return resolved
    values = [
        resolved.frequency,
        resolved.repetitiveness,
        resolved.data_dependency,
        resolved.decision_variability,
        resolved.complexity,
    ]
    largest = max(values)
    if largest <= 0:
        return ScoringWeights()
    # Scale by the largest weight first so the sum cannot overflow
    scaled = [v / largest for v in values]
    total = sum(scaled)
    return ScoringWeights(
        frequency=scaled[0] / total,
        repetitiveness=scaled[1] / total,
        data_dependency=scaled[2] / total,
        decision_variability=scaled[3] / total,
        complexity=scaled[4] / total,
    )


def compute_final_score(
    criteria: CriteriaScores,
    weights: Optional[ScoringWeights] = None,
    normalize_weights: bool = False,
) -> int:
    """Weighted composite on a 0-100 scale.

    composite = round(Σ criterion × weight / 5 × 100)

    Weights are used as given unless *normalize_weights* is set, so
    historical scores recorded with non-unit weight sums stay reproducible.
    The result is clamped to [0, 100].
    """
    w = _resolve_weights(weights, normalize_weights)
    raw_score = (
        criteria.frequency * w.frequency
        + criteria.repetitiveness * w.repetitiveness
        + criteria.data_dependency * w.data_dependency
        + criteria.decision_variability * w.decision_variability
        + criteria.complexity * w.complexity
    )
    scaled = raw_score / 5 * 100
    if math.isnan(scaled):
        return 0
    # Huge weights overflow to inf; clamp as a float before converting
    return _round_half_up(min(max(scaled, 0.0), 100.0))


def determine_category(final_score: int) -> AutomationCategory:
    if final_score >= FULLY_AUTOMATABLE_THRESHOLD:
        return AutomationCategory.FULLY_AUTOMATABLE
    if final_score >= PARTIALLY_AUTOMATABLE_THRESHOLD:
        return AutomationCategory.PARTIALLY_AUTOMATABLE
    return AutomationCategory.NOT_SUITABLE


def rationale_for(category: AutomationCategory) -> str:
    return _RATIONALE[category]


# ── Tool suggestions ────────────────────────────────────────────────────

def suggest_tools(task: TaskInput, final_score: int) -> List[ToolSuggestion]:
    """Rule-based tool suggestions, evaluated only when score >= 40.

    Rules are applied in a fixed order and several may fire. When none
    fires, a generic workflow-scripting suggestion is returned so a
    qualifying task always gets at least one entry.
    """
    if final_score < PARTIALLY_AUTOMATABLE_THRESHOLD:
        return []

    inputs = " ".join(task.inputs or []).lower()
    outputs = " ".join(task.outputs or []).lower()
    desc = (task.description or "").lower()

    suggestions: List[ToolSuggestion] = []

    if _contains_any(inputs, ("email", "crm")):
        suggestions.append(ToolSuggestion(
            category="AI Assistant",
            name="Chatbot / Email AI",
            explanation="Automate responses and data lookup.",
        ))
    if _contains_any(inputs, ("excel", "spreadsheet")):
        suggestions.append(ToolSuggestion(
            category="RPA / Integration",
            name="Zapier / Make",
            explanation="Connect spreadsheets to other apps automatically.",
        ))
    if _contains_any(inputs, ("pdf", "paper")):
        suggestions.append(ToolSuggestion(
            category="OCR",
            name="Document AI",
            explanation="Extract text from documents automatically.",
        ))
    if _contains_any(inputs, ("database", "api")) or "database" in outputs:
        suggestions.append(ToolSuggestion(
            category="Integration",
            name="n8n / Pipedream",
            explanation="Connect databases and APIs with low-code workflows.",
        ))
    if _contains_any(desc, ("approve", "review")) or "notification" in outputs:
        suggestions.append(ToolSuggestion(
            category="Approval & Notifications",
            name="Approval workflows / Slack",
            explanation="Route items for approval and send notifications automatically.",
        ))
    if "report" in outputs or _contains_any(desc, ("report", "summary")):
        suggestions.append(ToolSuggestion(
            category="Reporting",
            name="BI tools / Scheduled reports",
            explanation="Generate and distribute reports on a schedule.",
        ))

    if not suggestions:
        suggestions.append(ToolSuggestion(
            category="General Automation",
            name="Workflow Scripting",
            explanation="Custom scripts to handle data entry.",
        ))

    return suggestions


# ── Entry point ─────────────────────────────────────────────────────────

def score_task(
    task: TaskInput,
    weights: Optional[ScoringWeights] = None,
    normalize_weights: bool = False,
) -> TaskScore:
    """Score a task end to end.

    Parameters
    ----------
    task : TaskInput
        The task to score. Only read, never mutated.
    weights : ScoringWeights, optional
        Per-criterion weights. Defaults to ``DEFAULT_WEIGHTS``.
    normalize_weights : bool
        Divide weights by their sum first. Off by default.

    Returns
    -------
    TaskScore
        Criteria, composite, category, canned rationale and rule-based
        tool suggestions. ``automation_advice`` is always empty here.
    """
    criteria = compute_criteria(task)
    final_score = compute_final_score(criteria, weights, normalize_weights)
    category = determine_category(final_score)

    return TaskScore(
        task_id=task.id,
        criteria_scores=criteria,
        final_score=final_score,
        category=category,
        reasoning=rationale_for(category),
        automation_advice="",
        suggested_tools=suggest_tools(task, final_score),
    )

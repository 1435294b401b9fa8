"""AI enhancement of a computed score.

Capability interface:
    enhance(task, criteria, final_score, category) -> AIEnhancement | None

Invoked by routes after the deterministic score exists, never by the
Scoring Engine. Returns None when the provider is not configured or the
call fails, so callers keep the rule-based reasoning and tools.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..schemas.enhancement_schema import AIEnhancement
from ..schemas.score_schema import AutomationCategory, CriteriaScores, ToolSuggestion
from ..schemas.task_schema import TaskInput
from .llm_client import LLMRateLimitError, call_chat_async, is_llm_configured

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = "You are an expert automation consultant. Always respond with valid JSON only."

_NO_ADVICE = "No specific advice generated."

RATE_LIMITED_ENHANCEMENT = AIEnhancement(
    reasoning="AI service is currently busy (Rate Limit). Please try again in a minute.",
    automation_advice="Could not generate advice due to high traffic.",
    suggested_tools=[],
    rate_limited=True,
)


def build_prompt(
    task: TaskInput,
    criteria: CriteriaScores,
    final_score: int,
    category: AutomationCategory,
) -> str:
    return f"""You are an automation consultant. Analyze this task and provide a JSON response.

Task Details:
- Name: {task.name}
- Description: {task.description}
- Department: {task.department}
- Frequency: {task.frequency.value}
- Data Inputs: {', '.join(task.inputs) or 'none'}
- Data Outputs: {', '.join(task.outputs) or 'none'}
- Automation Score: {final_score}/100
- Category: {category.value}
- Criteria Scores:
  * Frequency: {criteria.frequency}
  * Repetitiveness: {criteria.repetitiveness}
  * Data Dependency: {criteria.data_dependency}
  * Decision Variability: {criteria.decision_variability}
  * Complexity: {criteria.complexity}

Provide your analysis in this exact JSON format:
{{
  "reasoning": "1-2 sentence explanation of why this task is/isn't suitable for automation",
  "automation_advice": "2-3 sentence step-by-step guide on how to automate this using AI or other tools",
  "suggested_tools": [
    {{
      "category": "tool category",
      "name": "specific tool name",
      "explanation": "one sentence explaining how this tool helps"
    }}
  ]
}}

Respond ONLY with valid JSON, no markdown formatting."""


def _parse_tools(raw: Any) -> List[ToolSuggestion]:
    if not isinstance(raw, list):
        return []
    tools: List[ToolSuggestion] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        category, name = item.get("category"), item.get("name")
        if not isinstance(category, str) or not isinstance(name, str):
            continue
        explanation = item.get("explanation")
        tools.append(ToolSuggestion(
            category=category,
            name=name,
            explanation=explanation if isinstance(explanation, str) else "",
        ))
    return tools


def parse_enhancement(parsed: Dict[str, Any]) -> AIEnhancement:
    """Validate a raw model response into an ``AIEnhancement``.

    Accepts both snake_case and camelCase keys, since models echo either.
    """
    reasoning = parsed.get("reasoning")
    advice = parsed.get("automation_advice", parsed.get("automationAdvice"))
    tools = parsed.get("suggested_tools", parsed.get("suggestedTools"))

    return AIEnhancement(
        reasoning=reasoning if isinstance(reasoning, str) else "",
        automation_advice=advice if isinstance(advice, str) else _NO_ADVICE,
        suggested_tools=_parse_tools(tools),
    )


async def enhance(
    task: TaskInput,
    criteria: CriteriaScores,
    final_score: int,
    category: AutomationCategory,
) -> Optional[AIEnhancement]:
    """Ask the text-generation API for reasoning, advice and tools.

    Returns
    -------
    AIEnhancement or None
        ``RATE_LIMITED_ENHANCEMENT`` on HTTP 429, None when unconfigured
        or on any other failure.
    """
    if not is_llm_configured():
        logger.warning("[ENHANCE] No LLM API key configured — skipping task %s", task.id)
        return None

    messages = [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": build_prompt(task, criteria, final_score, category)},
    ]

    try:
        parsed = await call_chat_async(messages=messages)
    except LLMRateLimitError:
        logger.warning("[ENHANCE] Rate limited while enhancing task %s", task.id)
        return RATE_LIMITED_ENHANCEMENT

    if parsed is None:
        logger.error("[ENHANCE] Enhancement failed for task %s", task.id)
        return None

    return parse_enhancement(parsed)

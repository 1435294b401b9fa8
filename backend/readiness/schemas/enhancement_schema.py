from typing import List

from pydantic import BaseModel, Field

from .score_schema import ToolSuggestion


class AIEnhancement(BaseModel):
    """Free-text enrichment returned by the external text-generation API.

    Overwrites ``reasoning`` / ``automation_advice`` / ``suggested_tools``
    on a stored ``TaskScore``; the criteria and composite stay untouched.
    """

    reasoning: str = ""
    automation_advice: str = ""
    suggested_tools: List[ToolSuggestion] = Field(default_factory=list)
    rate_limited: bool = Field(
        default=False,
        description="True when the provider answered 429 and this is a placeholder",
    )

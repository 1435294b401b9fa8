"""Stateless scoring routes.

Endpoints:
  POST /score            — Score a single task (nothing is stored)
  GET  /score/defaults   — Default weights and intake-form vocabulary
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from ..constants import (
    DATA_INPUT_OPTIONS,
    DATA_OUTPUT_OPTIONS,
    DEPARTMENTS,
    FREQUENCY_LABELS,
    FULLY_AUTOMATABLE_THRESHOLD,
    PARTIALLY_AUTOMATABLE_THRESHOLD,
)
from ..schemas.score_schema import ScoreRequest, ScoringWeights, TaskScore
from ..services.scoring_engine import score_task

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/score",
    tags=["Scoring"],
)


@router.post(
    "",
    response_model=TaskScore,
    status_code=status.HTTP_200_OK,
    summary="Score a Task",
    response_description="Criteria sub-scores, composite, category and tool suggestions",
)
def score(request: ScoreRequest) -> TaskScore:
    """Run the deterministic Scoring Engine on one task."""
    result = score_task(request.task, request.weights, request.normalize_weights)
    logger.info(
        "[SCORING] task=%s score=%s category=%s",
        request.task.id, result.final_score, result.category.value,
    )
    return result


@router.get(
    "/defaults",
    summary="Scoring Defaults",
    description="Default weights, category thresholds and intake-form options",
)
def defaults():
    return {
        "weights": ScoringWeights().model_dump(),
        "thresholds": {
            "fully": FULLY_AUTOMATABLE_THRESHOLD,
            "partially": PARTIALLY_AUTOMATABLE_THRESHOLD,
        },
        "departments": DEPARTMENTS,
        "frequencies": FREQUENCY_LABELS,
        "data_inputs": DATA_INPUT_OPTIONS,
        "data_outputs": DATA_OUTPUT_OPTIONS,
    }

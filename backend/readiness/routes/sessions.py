"""Assessment-session routes.

Endpoints:
  POST   /sessions                                   — Create a session
  GET    /sessions                                   — List sessions
  GET    /sessions/{id}                              — Get a session with tasks + scores
  PATCH  /sessions/{id}                              — Rename
  DELETE /sessions/{id}                              — Delete
  POST   /sessions/{id}/clear                        — Drop all tasks, new token
  GET    /sessions/{id}/settings                     — Weights + hourly rate
  PUT    /sessions/{id}/settings                     — Update weights / hourly rate
  POST   /sessions/{id}/rescore                      — Re-score all tasks
  GET    /sessions/{id}/summary                      — Category counts + ROI
  POST   /sessions/{id}/tasks                        — Add + score a task
  PUT    /sessions/{id}/tasks/{task_id}              — Update + re-score a task
  DELETE /sessions/{id}/tasks/{task_id}              — Remove a task
  PUT    /sessions/{id}/tasks/{task_id}/insight      — Overwrite reasoning/advice/tools
  POST   /sessions/{id}/tasks/{task_id}/enhance      — AI enhancement
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.score_schema import ScoreInsightUpdate
from ..schemas.session_schema import (
    AssessmentSessionRecord,
    SessionCreate,
    SessionListResponse,
    SessionRename,
    SessionSettings,
    SessionSummary,
    SettingsUpdate,
)
from ..schemas.task_schema import TaskInput
from ..services import session_service
from ..services.ai_enhancement import enhance
from ..services.llm_client import is_llm_configured

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sessions",
    tags=["Sessions"],
)


# ── Sessions ─────────────────────────────────────────────────────────────

@router.post(
    "",
    response_model=AssessmentSessionRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create an Assessment Session",
)
def create_session(
    payload: SessionCreate,
    db: Session = Depends(get_db),
) -> AssessmentSessionRecord:
    session = session_service.create_session(db, payload.name)
    return session_service.session_to_record(session)


@router.get(
    "",
    response_model=SessionListResponse,
    summary="List Assessment Sessions",
)
def list_sessions(db: Session = Depends(get_db)) -> SessionListResponse:
    return SessionListResponse(records=session_service.list_sessions(db))


@router.get(
    "/{session_id}",
    response_model=AssessmentSessionRecord,
    summary="Get an Assessment Session",
)
def get_session(session_id: UUID, db: Session = Depends(get_db)) -> AssessmentSessionRecord:
    return session_service.session_to_record(session_service.get_session(db, session_id))


@router.patch(
    "/{session_id}",
    response_model=AssessmentSessionRecord,
    summary="Rename an Assessment Session",
)
def rename_session(
    session_id: UUID,
    payload: SessionRename,
    db: Session = Depends(get_db),
) -> AssessmentSessionRecord:
    session = session_service.rename_session(db, session_id, payload.name)
    return session_service.session_to_record(session)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an Assessment Session",
)
def delete_session(session_id: UUID, db: Session = Depends(get_db)) -> Response:
    session_service.delete_session(db, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{session_id}/clear",
    response_model=AssessmentSessionRecord,
    summary="Clear all Tasks from a Session",
)
def clear_session(session_id: UUID, db: Session = Depends(get_db)) -> AssessmentSessionRecord:
    return session_service.session_to_record(session_service.clear_session(db, session_id))


# ── Settings & summary ───────────────────────────────────────────────────

@router.get(
    "/{session_id}/settings",
    response_model=SessionSettings,
    summary="Get Scoring Settings",
)
def get_settings(session_id: UUID, db: Session = Depends(get_db)) -> SessionSettings:
    return session_service.get_settings(db, session_id)


@router.put(
    "/{session_id}/settings",
    response_model=SessionSettings,
    summary="Update Scoring Settings",
)
def update_settings(
    session_id: UUID,
    payload: SettingsUpdate,
    db: Session = Depends(get_db),
) -> SessionSettings:
    return session_service.update_settings(db, session_id, payload)


@router.post(
    "/{session_id}/rescore",
    response_model=AssessmentSessionRecord,
    summary="Re-score every Task with the current Weights",
)
def rescore_session(session_id: UUID, db: Session = Depends(get_db)) -> AssessmentSessionRecord:
    return session_service.session_to_record(session_service.rescore_session(db, session_id))


@router.get(
    "/{session_id}/summary",
    response_model=SessionSummary,
    summary="Session Summary",
    response_description="Category counts, monthly hours saved and potential savings",
)
def summarize_session(session_id: UUID, db: Session = Depends(get_db)) -> SessionSummary:
    return session_service.summarize_session(db, session_id)


# ── Tasks ────────────────────────────────────────────────────────────────

@router.post(
    "/{session_id}/tasks",
    response_model=AssessmentSessionRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Add and Score a Task",
)
def add_task(
    session_id: UUID,
    payload: TaskInput,
    db: Session = Depends(get_db),
) -> AssessmentSessionRecord:
    return session_service.session_to_record(session_service.add_task(db, session_id, payload))


@router.put(
    "/{session_id}/tasks/{task_id}",
    response_model=AssessmentSessionRecord,
    summary="Update and Re-score a Task",
)
def update_task(
    session_id: UUID,
    task_id: str,
    payload: TaskInput,
    db: Session = Depends(get_db),
) -> AssessmentSessionRecord:
    session = session_service.update_task(db, session_id, task_id, payload)
    return session_service.session_to_record(session)


@router.delete(
    "/{session_id}/tasks/{task_id}",
    response_model=AssessmentSessionRecord,
    summary="Remove a Task",
)
def remove_task(
    session_id: UUID,
    task_id: str,
    db: Session = Depends(get_db),
) -> AssessmentSessionRecord:
    session = session_service.remove_task(db, session_id, task_id)
    return session_service.session_to_record(session)


@router.put(
    "/{session_id}/tasks/{task_id}/insight",
    response_model=AssessmentSessionRecord,
    summary="Overwrite a Score's Reasoning, Advice and Tools",
)
def update_score_insight(
    session_id: UUID,
    task_id: str,
    payload: ScoreInsightUpdate,
    db: Session = Depends(get_db),
) -> AssessmentSessionRecord:
    session = session_service.update_score_insight(db, session_id, task_id, payload)
    return session_service.session_to_record(session)


@router.post(
    "/{session_id}/tasks/{task_id}/enhance",
    response_model=AssessmentSessionRecord,
    summary="Enhance a Score with AI",
    response_description="Session with the task's reasoning, advice and tools overwritten",
)
async def enhance_task(
    session_id: UUID,
    task_id: str,
    db: Session = Depends(get_db),
) -> AssessmentSessionRecord:
    """Call the external text-generation API and store its output.

    The deterministic criteria, composite and category are never changed.
    """
    if not is_llm_configured():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="AI enhancement is not configured (LLM_API_KEY not set)",
        )

    task, score = session_service.get_task_and_score(db, session_id, task_id)

    result = await enhance(task, score.criteria_scores, score.final_score, score.category)

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="AI enhancement failed — rule-based results were kept",
        )
    if result.rate_limited:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=result.reasoning,
        )

    session = session_service.update_score_insight(
        db,
        session_id,
        task_id,
        ScoreInsightUpdate(
            reasoning=result.reasoning,
            automation_advice=result.automation_advice,
            suggested_tools=result.suggested_tools,
        ),
    )
    logger.info("[ENHANCE] Stored AI insight for task %s", task_id)
    return session_service.session_to_record(session)

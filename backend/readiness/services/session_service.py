"""Assessment-session persistence.

Stores sessions, tasks and scores with SQLAlchemy and re-runs the
Scoring Engine whenever a task is added or changed. The engine itself
stays pure: this module reads the session's weights and passes them in
explicitly.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..constants import (
    DEFAULT_SESSION_NAME_PREFIX,
    LEGACY_SAVINGS_PER_SCORE_POINT,
    SESSION_TTL_DAYS,
)
from ..exceptions import DuplicateTaskError, SessionNotFoundError, TaskNotFoundError
from ..models.assessment import AssessmentSession, Task, TaskScoreRecord
from ..schemas.score_schema import (
    AutomationCategory,
    CriteriaScores,
    ScoreInsightUpdate,
    ScoringWeights,
    TaskScore,
    ToolSuggestion,
)
from ..schemas.session_schema import (
    AssessmentSessionRecord,
    SessionMeta,
    SessionSettings,
    SessionSummary,
    SettingsUpdate,
    TaskROI,
)
from ..schemas.task_schema import TaskInput
from .roi_calculator import estimate_roi
from .scoring_engine import score_task

logger = logging.getLogger(__name__)


# ── Row <-> schema conversion ────────────────────────────────────────────

def _load_json_list(raw: Optional[str]) -> list:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        return []
    return value if isinstance(value, list) else []


def weights_for(session: AssessmentSession) -> ScoringWeights:
    """Stored weights merged over the defaults."""
    if not session.weights_json:
        return ScoringWeights()
    try:
        stored = json.loads(session.weights_json)
        return ScoringWeights(**stored)
    except (json.JSONDecodeError, TypeError, ValidationError) as exc:
        logger.warning("[SESSION] Ignoring unreadable weights for %s: %s", session.id, exc)
        return ScoringWeights()


def task_to_schema(task: Task) -> TaskInput:
    return TaskInput(
        id=task.id,
        name=task.name,
        department=task.department,
        description=task.description or "",
        frequency=task.frequency,
        time_per_task=task.time_per_task,
        inputs=_load_json_list(task.inputs_json),
        outputs=_load_json_list(task.outputs_json),
    )


def score_to_schema(record: TaskScoreRecord) -> TaskScore:
    try:
        criteria = CriteriaScores(**json.loads(record.criteria_json))
    except (json.JSONDecodeError, TypeError, ValidationError):
        criteria = CriteriaScores(
            frequency=3,
            repetitiveness=3,
            data_dependency=3,
            decision_variability=3,
            complexity=3,
        )
    tools = [
        ToolSuggestion(**t)
        for t in _load_json_list(record.suggested_tools_json)
        if isinstance(t, dict) and "category" in t and "name" in t
    ]
    return TaskScore(
        task_id=record.task_id,
        criteria_scores=criteria,
        final_score=record.final_score,
        category=AutomationCategory(record.category),
        reasoning=record.reasoning or "",
        automation_advice=record.automation_advice or "",
        suggested_tools=tools,
    )


def session_to_record(session: AssessmentSession) -> AssessmentSessionRecord:
    tasks = [task_to_schema(t) for t in session.tasks]
    scores = {t.id: score_to_schema(t.score) for t in session.tasks if t.score is not None}
    return AssessmentSessionRecord(
        id=str(session.id),
        name=session.name,
        token=session.token,
        created_at=session.created_at,
        settings=SessionSettings(weights=weights_for(session), hourly_rate=session.hourly_rate),
        tasks=tasks,
        scores=scores,
    )


def _fill_task(row: Task, payload: TaskInput) -> None:
    row.name = payload.name
    row.department = payload.department
    row.description = payload.description
    row.frequency = payload.frequency.value
    row.time_per_task = payload.time_per_task
    row.inputs_json = json.dumps(payload.inputs)
    row.outputs_json = json.dumps(payload.outputs)


def _store_score(row: Task, score: TaskScore) -> None:
    """Write a freshly computed score onto the task, dropping any enrichment."""
    record = row.score
    if record is None:
        record = TaskScoreRecord(session_id=row.session_id, task_id=row.id)
        row.score = record
    record.criteria_json = score.criteria_scores.model_dump_json()
    record.final_score = score.final_score
    record.category = score.category.value
    record.reasoning = score.reasoning
    record.automation_advice = score.automation_advice
    record.suggested_tools_json = json.dumps([t.model_dump() for t in score.suggested_tools])
    record.enhanced_at = None


# ── Lookups ──────────────────────────────────────────────────────────────

def _get_session_row(db: Session, session_id: uuid.UUID) -> AssessmentSession:
    session = db.query(AssessmentSession).filter(AssessmentSession.id == session_id).first()
    if session is None:
        raise SessionNotFoundError(session_id)
    return session


def _get_task_row(db: Session, session_id: uuid.UUID, task_id: str) -> Task:
    task = (
        db.query(Task)
        .filter(Task.session_id == session_id, Task.id == task_id)
        .first()
    )
    if task is None:
        raise TaskNotFoundError(session_id, task_id)
    return task


# ── Sessions ─────────────────────────────────────────────────────────────

def create_session(db: Session, name: Optional[str] = None) -> AssessmentSession:
    """Persist a new empty session. Default name is ``Assessment N``."""
    if not name:
        count = db.query(AssessmentSession).count()
        name = f"{DEFAULT_SESSION_NAME_PREFIX} {count + 1}"
    session = AssessmentSession(name=name, token=str(uuid.uuid4()))
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info("[SESSION] Created session %s (%s)", session.id, session.name)
    return session


def list_sessions(db: Session) -> List[SessionMeta]:
    rows = db.query(AssessmentSession).order_by(AssessmentSession.created_at.asc()).all()
    return [SessionMeta(id=str(r.id), name=r.name, created_at=r.created_at) for r in rows]


def get_session(db: Session, session_id: uuid.UUID) -> AssessmentSession:
    """Fetch a session, re-issuing the token of stale empty sessions.

    A session older than ``SESSION_TTL_DAYS`` that never received a task
    gets a fresh token and ``created_at``.
    """
    session = _get_session_row(db, session_id)
    age = datetime.utcnow() - (session.created_at or datetime.utcnow())
    if age >= timedelta(days=SESSION_TTL_DAYS) and not session.tasks:
        logger.info("[SESSION] Session %s expired while empty — re-issuing token", session.id)
        session.token = str(uuid.uuid4())
        session.created_at = datetime.utcnow()
        db.commit()
        db.refresh(session)
    return session


def rename_session(db: Session, session_id: uuid.UUID, name: str) -> AssessmentSession:
    session = _get_session_row(db, session_id)
    session.name = name
    db.commit()
    db.refresh(session)
    return session


def delete_session(db: Session, session_id: uuid.UUID) -> None:
    session = _get_session_row(db, session_id)
    db.delete(session)
    db.commit()
    logger.info("[SESSION] Deleted session %s", session_id)


def clear_session(db: Session, session_id: uuid.UUID) -> AssessmentSession:
    """Remove every task and score and issue a new token. Settings survive."""
    session = _get_session_row(db, session_id)
    session.tasks.clear()
    session.token = str(uuid.uuid4())
    session.created_at = datetime.utcnow()
    db.commit()
    db.refresh(session)
    return session


# ── Tasks ────────────────────────────────────────────────────────────────

def add_task(db: Session, session_id: uuid.UUID, payload: TaskInput) -> AssessmentSession:
    """Append a task to the session and score it with the session's weights."""
    session = _get_session_row(db, session_id)
    if any(t.id == payload.id for t in session.tasks):
        raise DuplicateTaskError(session_id, payload.id)

    position = max((t.position for t in session.tasks), default=-1) + 1
    row = Task(session_id=session.id, id=payload.id, position=position)
    _fill_task(row, payload)
    session.tasks.append(row)
    _store_score(row, score_task(payload, weights_for(session)))

    db.commit()
    db.refresh(session)
    logger.info(
        "[SESSION] Added task %s to %s — score=%s",
        payload.id, session_id, row.score.final_score,
    )
    return session


def update_task(
    db: Session,
    session_id: uuid.UUID,
    task_id: str,
    payload: TaskInput,
) -> AssessmentSession:
    """Replace a task's fields and re-score it. The task id never changes."""
    session = _get_session_row(db, session_id)
    row = _get_task_row(db, session_id, task_id)
    payload = payload.model_copy(update={"id": task_id})
    _fill_task(row, payload)
    _store_score(row, score_task(payload, weights_for(session)))
    db.commit()
    db.refresh(session)
    return session


def remove_task(db: Session, session_id: uuid.UUID, task_id: str) -> AssessmentSession:
    session = _get_session_row(db, session_id)
    row = _get_task_row(db, session_id, task_id)
    session.tasks.remove(row)
    db.commit()
    db.refresh(session)
    return session


def get_task_and_score(
    db: Session,
    session_id: uuid.UUID,
    task_id: str,
) -> tuple[TaskInput, TaskScore]:
    """Return a task and its stored score, scoring that task alone if needed.

    Other tasks in the session are left untouched, so their insights survive.
    """
    session = _get_session_row(db, session_id)
    row = _get_task_row(db, session_id, task_id)
    if row.score is None:
        _store_score(row, score_task(task_to_schema(row), weights_for(session)))
        db.commit()
        db.refresh(row)
    return task_to_schema(row), score_to_schema(row.score)


def update_score_insight(
    db: Session,
    session_id: uuid.UUID,
    task_id: str,
    update: ScoreInsightUpdate,
) -> AssessmentSession:
    """Overwrite the enrichment fields of a stored score.

    Criteria, composite and category are left as computed.
    """
    session = _get_session_row(db, session_id)
    row = _get_task_row(db, session_id, task_id)
    if row.score is None:
        _store_score(row, score_task(task_to_schema(row), weights_for(session)))

    row.score.reasoning = update.reasoning
    row.score.automation_advice = update.automation_advice or ""
    row.score.suggested_tools_json = json.dumps([t.model_dump() for t in update.suggested_tools])
    row.score.enhanced_at = datetime.utcnow()
    db.commit()
    db.refresh(session)
    return session


# ── Settings ─────────────────────────────────────────────────────────────

def get_settings(db: Session, session_id: uuid.UUID) -> SessionSettings:
    session = _get_session_row(db, session_id)
    return SessionSettings(weights=weights_for(session), hourly_rate=session.hourly_rate)


def rescore_session(db: Session, session_id: uuid.UUID) -> AssessmentSession:
    """Re-run the engine on every task with the session's current weights."""
    session = _get_session_row(db, session_id)
    weights = weights_for(session)
    for row in session.tasks:
        _store_score(row, score_task(task_to_schema(row), weights))
    db.commit()
    db.refresh(session)
    logger.info("[SESSION] Re-scored %d tasks in %s", len(session.tasks), session_id)
    return session


def update_settings(
    db: Session,
    session_id: uuid.UUID,
    update: SettingsUpdate,
) -> SessionSettings:
    session = _get_session_row(db, session_id)
    if update.weights is not None:
        session.weights_json = update.weights.model_dump_json()
    if update.clear_hourly_rate:
        session.hourly_rate = None
    elif update.hourly_rate is not None:
        session.hourly_rate = update.hourly_rate
    db.commit()

    if update.rescore:
        rescore_session(db, session_id)

    db.refresh(session)
    return SessionSettings(weights=weights_for(session), hourly_rate=session.hourly_rate)


# ── Summary ──────────────────────────────────────────────────────────────

def summarize_session(db: Session, session_id: uuid.UUID) -> SessionSummary:
    """Category counts plus ROI totals over the session's scored tasks.

    Without an hourly rate, potential savings fall back to the legacy
    heuristic of 15 per score point.
    """
    session = _get_session_row(db, session_id)
    rate = session.hourly_rate

    counts = {category: 0 for category in AutomationCategory}
    per_task: List[TaskROI] = []
    legacy_savings = 0.0

    for row in session.tasks:
        if row.score is None:
            continue
        counts[AutomationCategory(row.score.category)] += 1
        legacy_savings += row.score.final_score * LEGACY_SAVINGS_PER_SCORE_POINT
        roi = estimate_roi(row.time_per_task, row.frequency, row.score.final_score, rate)
        per_task.append(TaskROI(
            task_id=row.id,
            monthly_occurrences=roi.monthly_occurrences,
            monthly_hours_saved=roi.monthly_hours_saved,
            monthly_value=roi.monthly_value,
        ))

    if rate is not None and rate > 0:
        potential_savings = sum(t.monthly_value for t in per_task)
    else:
        potential_savings = legacy_savings

    return SessionSummary(
        total=len(per_task),
        fully=counts[AutomationCategory.FULLY_AUTOMATABLE],
        partially=counts[AutomationCategory.PARTIALLY_AUTOMATABLE],
        not_suitable=counts[AutomationCategory.NOT_SUITABLE],
        total_time_saved=sum(t.monthly_hours_saved for t in per_task),
        potential_savings=potential_savings,
        hourly_rate=rate,
        per_task=per_task,
    )

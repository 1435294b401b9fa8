"""CSV and JSON exports of an assessment session."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime
from typing import List, Optional

from ..schemas.session_schema import AssessmentSessionRecord

CSV_HEADER: List[str] = [
    "Task Name",
    "Department",
    "Description",
    "Frequency",
    "Time (min)",
    "Score",
    "Category",
    "Reasoning",
    "Inputs",
    "Outputs",
    "Suggested Tools",
]


def export_filename(extension: str, now: Optional[datetime] = None) -> str:
    """``automation-readiness-report-YYYY-MM-DD.<ext>``"""
    day = (now or datetime.utcnow()).date().isoformat()
    return f"automation-readiness-report-{day}.{extension}"


def export_to_csv(session: AssessmentSessionRecord) -> str:
    """One row per task. Unscored tasks leave the score columns blank."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for task in session.tasks:
        score = session.scores.get(task.id)
        writer.writerow([
            task.name,
            task.department,
            task.description or "",
            task.frequency.value,
            str(task.time_per_task),
            str(score.final_score) if score else "",
            score.category.value if score else "",
            (score.reasoning or "") if score else "",
            "; ".join(task.inputs),
            "; ".join(task.outputs),
            "; ".join(f"{t.name}: {t.explanation}" for t in score.suggested_tools) if score else "",
        ])

    return buffer.getvalue()


def export_to_json(session: AssessmentSessionRecord, now: Optional[datetime] = None) -> str:
    payload = {
        "exported_at": (now or datetime.utcnow()).isoformat(),
        "session": {
            "token": session.token,
            "created_at": session.created_at.isoformat(),
            "tasks": [t.model_dump(mode="json") for t in session.tasks],
            "scores": {
                task_id: score.model_dump(mode="json")
                for task_id, score in session.scores.items()
            },
        },
    }
    return json.dumps(payload, indent=2)

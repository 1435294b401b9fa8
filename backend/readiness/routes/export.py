"""Export routes — download a session as CSV or JSON.

Endpoints:
  GET /sessions/{session_id}/export/csv
  GET /sessions/{session_id}/export/json
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..services import session_service
from ..services.export_service import export_filename, export_to_csv, export_to_json

router = APIRouter(
    prefix="/sessions",
    tags=["Export"],
)


def _attachment(content: str, media_type: str, extension: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{export_filename(extension)}"'},
    )


@router.get("/{session_id}/export/csv", summary="Export Session as CSV")
def export_csv(session_id: UUID, db: Session = Depends(get_db)) -> Response:
    record = session_service.session_to_record(session_service.get_session(db, session_id))
    return _attachment(export_to_csv(record), "text/csv; charset=utf-8", "csv")


@router.get("/{session_id}/export/json", summary="Export Session as JSON")
def export_json(session_id: UUID, db: Session = Depends(get_db)) -> Response:
    record = session_service.session_to_record(session_service.get_session(db, session_id))
    return _attachment(export_to_json(record), "application/json", "json")

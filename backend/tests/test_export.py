"""Export tests — CSV and JSON rendering of a session record."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import csv
import io
import json
from datetime import datetime

from readiness.schemas.session_schema import AssessmentSessionRecord, SessionSettings
from readiness.schemas.task_schema import Frequency, TaskInput
from readiness.services.export_service import (
    CSV_HEADER,
    export_filename,
    export_to_csv,
    export_to_json,
)
from readiness.services.scoring_engine import score_task


def _session():
    scored = TaskInput(
        id="t-1",
        name="Invoice entry",
        department="Finance",
        description='Copy the "total" into the same sheet',
        frequency=Frequency.MANY_TIMES_DAILY,
        time_per_task=5,
        inputs=["Email", "Excel/Spreadsheets"],
        outputs=["Excel/Spreadsheets"],
    )
    unscored = TaskInput(
        id="t-2",
        name="Quarterly plan",
        frequency=Frequency.MONTHLY_OR_LESS,
        time_per_task=120,
    )
    return AssessmentSessionRecord(
        id="00000000-0000-0000-0000-000000000001",
        name="Assessment 1",
        token="tok-123",
        created_at=datetime(2026, 1, 2, 3, 4, 5),
        settings=SessionSettings(),
        tasks=[scored, unscored],
        scores={"t-1": score_task(scored)},
    )


class TestCSVExport:
    def test_header_and_rows(self):
        rows = list(csv.reader(io.StringIO(export_to_csv(_session()))))
        assert rows[0] == CSV_HEADER
        assert len(rows) == 3

    def test_scored_row(self):
        session = _session()
        row = list(csv.reader(io.StringIO(export_to_csv(session))))[1]
        score = session.scores["t-1"]
        assert row[0] == "Invoice entry"
        assert row[2] == 'Copy the "total" into the same sheet'
        assert row[3] == "many_times_daily"
        assert row[4] == "5"
        assert row[5] == str(score.final_score)
        assert row[6] == score.category.value
        assert row[8] == "Email; Excel/Spreadsheets"
        assert row[10].startswith("Chatbot / Email AI: ")

    def test_unscored_row_leaves_score_columns_blank(self):
        row = list(csv.reader(io.StringIO(export_to_csv(_session()))))[2]
        assert row[0] == "Quarterly plan"
        assert row[5] == row[6] == row[7] == row[10] == ""


class TestJSONExport:
    def test_payload_shape(self):
        now = datetime(2026, 3, 1, 12, 0, 0)
        payload = json.loads(export_to_json(_session(), now=now))
        assert payload["exported_at"] == "2026-03-01T12:00:00"
        assert payload["session"]["token"] == "tok-123"
        assert [t["id"] for t in payload["session"]["tasks"]] == ["t-1", "t-2"]
        assert list(payload["session"]["scores"]) == ["t-1"]
        assert payload["session"]["scores"]["t-1"]["category"] in ("fully", "partially", "not_suitable")


class TestFilename:
    def test_dated_filename(self):
        assert export_filename("csv", datetime(2026, 10, 17)) == "automation-readiness-report-2026-10-17.csv"

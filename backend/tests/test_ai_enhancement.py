"""AI enhancement tests — JSON sanitizing, response parsing, HTTP failure modes.

All tests mock the HTTP transport; nothing reaches a real provider.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json
from unittest.mock import patch

import httpx
import pytest

from readiness.schemas.score_schema import AutomationCategory
from readiness.schemas.task_schema import Frequency, TaskInput
from readiness.services.ai_enhancement import (
    RATE_LIMITED_ENHANCEMENT,
    build_prompt,
    enhance,
    parse_enhancement,
)
from readiness.services.llm_client import sanitize_json
from readiness.services.scoring_engine import score_task

_RealAsyncClient = httpx.AsyncClient


def _task():
    return TaskInput(
        id="enh-1",
        name="Lead follow-up",
        department="Sales",
        description="Send the same follow-up email to every new lead",
        frequency=Frequency.DAILY_HIGH,
        time_per_task=5,
        inputs=["CRM (Salesforce, HubSpot)"],
        outputs=["Email Response"],
    )


def _run_enhance(handler):
    """Run enhance() with httpx routed through a mock transport."""
    task = _task()
    score = score_task(task)

    def client_factory(*args, **kwargs):
        return _RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs)

    with patch("readiness.services.llm_client.httpx.AsyncClient", side_effect=client_factory):
        return asyncio.run(
            enhance(task, score.criteria_scores, score.final_score, score.category)
        )


def _chat_response(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


@pytest.fixture(autouse=True)
def llm_env(monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "test-key")
    monkeypatch.setenv("LLM_API_URL", "https://llm.test/v1/chat/completions")


# ===================================================================== #
#  Unit tests: sanitize / parse                                           #
# ===================================================================== #

class TestSanitizeJSON:
    def test_plain_object(self):
        assert json.loads(sanitize_json('{"a": 1}')) == {"a": 1}

    def test_markdown_fence(self):
        assert json.loads(sanitize_json('```json\n{"a": 1}\n```')) == {"a": 1}

    def test_prose_and_trailing_comma(self):
        raw = 'Here you go: {"a": [1, 2,], "b": 2,} Thanks!'
        assert json.loads(sanitize_json(raw)) == {"a": [1, 2], "b": 2}

    def test_no_object(self):
        with pytest.raises(ValueError):
            sanitize_json("no json here")


class TestParseEnhancement:
    def test_snake_case(self):
        result = parse_enhancement({
            "reasoning": "Highly repetitive.",
            "automation_advice": "Use a CRM workflow.",
            "suggested_tools": [{"category": "CRM", "name": "HubSpot Workflows", "explanation": "Sends emails."}],
        })
        assert result.reasoning == "Highly repetitive."
        assert result.automation_advice == "Use a CRM workflow."
        assert result.suggested_tools[0].name == "HubSpot Workflows"

    def test_camel_case(self):
        result = parse_enhancement({
            "reasoning": "ok",
            "automationAdvice": "do it",
            "suggestedTools": [{"category": "A", "name": "B"}],
        })
        assert result.automation_advice == "do it"
        assert result.suggested_tools[0].explanation == ""

    def test_invalid_fields_degrade(self):
        result = parse_enhancement({
            "reasoning": 42,
            "suggested_tools": [{"category": 1, "name": "x"}, "junk", {"category": "C", "name": "D"}],
        })
        assert result.reasoning == ""
        assert result.automation_advice == "No specific advice generated."
        assert [t.name for t in result.suggested_tools] == ["D"]

    def test_prompt_mentions_scores(self):
        task = _task()
        score = score_task(task)
        prompt = build_prompt(task, score.criteria_scores, score.final_score, score.category)
        assert f"Automation Score: {score.final_score}/100" in prompt
        assert "CRM (Salesforce, HubSpot)" in prompt
        assert "daily_high" in prompt


# ===================================================================== #
#  enhance() with mocked HTTP                                             #
# ===================================================================== #

class TestEnhance:
    def test_success(self):
        body = json.dumps({
            "reasoning": "Same email every time.",
            "automation_advice": "Trigger an email sequence from the CRM.",
            "suggested_tools": [{"category": "CRM", "name": "HubSpot Sequences", "explanation": "Automates follow-ups."}],
        })
        result = _run_enhance(lambda request: _chat_response(body))
        assert result is not None
        assert result.rate_limited is False
        assert result.reasoning == "Same email every time."
        assert result.suggested_tools[0].category == "CRM"

    def test_sends_bearer_key_and_json_mode(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return _chat_response('{"reasoning": "r"}')

        _run_enhance(handler)
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["response_format"] == {"type": "json_object"}
        assert seen["body"]["messages"][0]["role"] == "system"

    def test_rate_limited(self):
        result = _run_enhance(lambda request: httpx.Response(429, text="slow down"))
        assert result is RATE_LIMITED_ENHANCEMENT
        assert result.rate_limited is True

    def test_server_error_retries_then_none(self):
        calls = []

        def handler(request):
            calls.append(1)
            return httpx.Response(500, text="boom")

        assert _run_enhance(handler) is None
        assert len(calls) == 2

    def test_retry_recovers(self):
        responses = [
            _chat_response("not json at all"),
            _chat_response('{"reasoning": "second try"}'),
        ]
        result = _run_enhance(lambda request: responses.pop(0))
        assert result is not None
        assert result.reasoning == "second try"

    def test_timeout_returns_none(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        assert _run_enhance(handler) is None

    def test_not_configured(self, monkeypatch):
        monkeypatch.delenv("LLM_API_KEY")
        task = _task()
        score = score_task(task)
        result = asyncio.run(
            enhance(task, score.criteria_scores, score.final_score, AutomationCategory(score.category))
        )
        assert result is None

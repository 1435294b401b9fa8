"""Centralized client for an OpenAI-compatible chat completions API.

The AI enhancement MUST go through `call_chat_async()` from this module.
This ensures:
  - URL, model, temperature, timeout and token limits are read from env.
  - JSON response format is enforced via response_format.
  - 1 retry on failure (timeout, non-200, empty or invalid JSON), then None.
  - HTTP 429 is surfaced as `LLMRateLimitError` (no retry).
  - Consistent logging.

Defaults target Groq's OpenAI-compatible endpoint; any compatible
provider works by setting LLM_API_URL / LLM_MODEL.
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants: all read from environment with safe defaults
# ---------------------------------------------------------------------------
_DEFAULT_API_URL = "https://api.groq.com/openai/v1/chat/completions"
_DEFAULT_MODEL = "llama-3.3-70b-versatile"


class LLMRateLimitError(Exception):
    """Provider answered HTTP 429."""


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_api_key() -> str:
    """Read LLM_API_KEY from the environment. Raises EnvironmentError if missing."""
    key = os.getenv("LLM_API_KEY", "").strip()
    if not key:
        logger.warning("[LLM] API key missing (LLM_API_KEY)")
        raise EnvironmentError("LLM_API_KEY environment variable not set")
    return key


def is_llm_configured() -> bool:
    return bool(os.getenv("LLM_API_KEY", "").strip())


def get_api_url() -> str:
    return os.getenv("LLM_API_URL", _DEFAULT_API_URL).strip()


def get_model() -> str:
    """Read LLM_MODEL from the environment (default: llama-3.3-70b-versatile)."""
    return os.getenv("LLM_MODEL", _DEFAULT_MODEL).strip()


def _get_temperature() -> float:
    return _env_float("LLM_TEMPERATURE", 0.3)


def _get_timeout() -> float:
    return _env_float("LLM_REQUEST_TIMEOUT", 30.0)


def _get_default_max_tokens() -> int:
    return _env_int("LLM_MAX_TOKENS", 1024)


# ---------------------------------------------------------------------------
# JSON sanitizer: extracts valid JSON from LLM output
# ---------------------------------------------------------------------------
def sanitize_json(raw: str) -> str:
    """Extract a JSON object from raw LLM output.

    Handles:
      - Markdown fences (```json ... ```)
      - Leading/trailing whitespace and BOM
      - Prose before/after JSON
      - Trailing commas before } or ]

    Raises ValueError if no JSON object is found.
    """
    text = raw.strip().lstrip("\ufeff")

    if text.startswith("```"):
        parts = text.split("```")
        # parts: ["", "json\n{...}", ""] or ["", "{...}", ""]
        if len(parts) >= 3:
            text = parts[1]
        else:
            text = text[3:]

    text = text.strip()
    if text.lower().startswith("json"):
        text = text[4:].strip()

    brace_idx = text.find("{")
    if brace_idx == -1:
        raise ValueError("LLM did not return a JSON object — no '{' found")
    text = text[brace_idx:]

    rbrace_idx = text.rfind("}")
    if rbrace_idx == -1:
        raise ValueError("LLM did not return a JSON object — no '}' found")
    text = text[: rbrace_idx + 1]

    return re.sub(r",\s*([}\]])", r"\1", text)


def build_payload(
    *,
    model: str,
    messages: List[Dict[str, str]],
    max_tokens: int,
    temperature: float,
) -> Dict[str, Any]:
    """Build a chat completions payload with JSON mode enabled."""
    return {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
        "temperature": temperature,
        "response_format": {"type": "json_object"},
    }


async def call_chat_async(
    *,
    messages: List[Dict[str, str]],
    max_tokens: int = 0,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Call the chat completions API and return the parsed JSON dict, or None.

    Parameters
    ----------
    messages : list[dict]
        The messages array (system + user).
    max_tokens : int
        Token limit for the response. 0 = use env default.
    api_key : str, optional
        Override API key (default: from env).
    model : str, optional
        Override model name (default: from env).

    Raises
    ------
    LLMRateLimitError
        The provider answered 429.
    """
    if api_key is None:
        api_key = get_api_key()
    if model is None:
        model = get_model()
    if max_tokens <= 0:
        max_tokens = _get_default_max_tokens()

    url = get_api_url()
    timeout = _get_timeout()
    max_retries = 1  # 1 retry only (2 attempts total)

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = build_payload(
        model=model,
        messages=messages,
        max_tokens=max_tokens,
        temperature=_get_temperature(),
    )

    for attempt in range(max_retries + 1):
        t0 = time.time()
        try:
            logger.info("[LLM] Calling %s (attempt %d/%d)", model, attempt + 1, max_retries + 1)
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(url, headers=headers, json=payload)
            logger.info("[LLM] HTTP %s (%.1fs)", response.status_code, time.time() - t0)

            if response.status_code == 429:
                raise LLMRateLimitError("Rate limit exceeded (429)")

            if response.status_code != 200:
                logger.warning("[LLM] Error response: %s", response.text[:400])
                if attempt < max_retries:
                    continue
                return None

            data = response.json()
            raw_content = (data["choices"][0]["message"]["content"] or "").strip()

            if not raw_content:
                logger.warning("[LLM] Empty response (attempt %d)", attempt + 1)
                if attempt < max_retries:
                    continue
                return None

            parsed = json.loads(sanitize_json(raw_content))
            if not isinstance(parsed, dict):
                return None
            return parsed

        except LLMRateLimitError:
            raise

        except (ValueError, KeyError, IndexError, TypeError) as exc:
            # json.JSONDecodeError is a ValueError
            logger.warning("[LLM] Unusable response — %s", exc)
            if attempt < max_retries:
                continue
            return None

        except httpx.TimeoutException:
            logger.warning("[LLM] Timeout after %.1fs", time.time() - t0)
            if attempt < max_retries:
                continue
            return None

        except httpx.HTTPError as exc:
            logger.error("[LLM] Transport error: %s", exc)
            return None

    return None

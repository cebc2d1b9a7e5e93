"""Helpers for pulling JSON out of free-form LLM output."""

from __future__ import annotations

import json
from typing import Any

from mindmate.errors import MalformedResponseError


def extract_json_object(text: str) -> str | None:
    """Return the span from the first ``{`` to the last ``}`` in ``text``.

    Handles prose or markdown fences around the object. Braces in the
    surrounding prose end up inside the span and break the parse; callers
    get a MalformedResponseError in that case.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def parse_json_object(text: str) -> Any:
    """Extract and decode the embedded JSON object.

    Raises:
        MalformedResponseError: If there is no ``{...}`` span or it is not valid JSON.
    """
    raw = extract_json_object(text)
    if raw is None:
        raise MalformedResponseError("No valid JSON object found in the AI response.")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise MalformedResponseError(f"AI response contained invalid JSON: {exc}") from exc

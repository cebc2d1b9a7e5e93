"""Client for the remote journal-analysis endpoint.

One awaited POST per call: the prompt goes out as ``{"query": ...}`` and
the reply's ``answer`` field carries free text with a JSON object
somewhere inside it. The object is extracted, validated, and returned as
an :class:`~mindmate.models.Analysis`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pydantic

from mindmate.config import ApiConfig
from mindmate.errors import MalformedResponseError, TransportError, ValidationError
from mindmate.llm import parse_json_object
from mindmate.models import Analysis
from mindmate.prompts import build_analysis_prompt

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("mood", "summary", "tip", "reflectionPrompt")

_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class AnalysisClient:
    """Sends journal text to the analysis endpoint.

    No retries, caching, or deduplication: concurrent calls run
    independently and the caller decides whether to re-invoke.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or ApiConfig()
        self._transport = transport

    @property
    def url(self) -> str:
        return self._config.url

    async def analyze(self, text: str) -> Analysis:
        """Analyze one journal entry.

        Callers must reject blank ``text`` before calling.

        Raises:
            TransportError: Non-2xx status or the request failed outright.
            MalformedResponseError: No parseable JSON object in the answer.
            ValidationError: The object lacks required fields or has the wrong shape.
        """
        prompt = build_analysis_prompt(text)
        logger.debug("POST %s (prompt %d chars)", self.url, len(prompt))

        try:
            async with self._make_client() as client:
                response = await client.post(
                    self.url, json={"query": prompt}, headers=_HEADERS
                )
        except httpx.HTTPError as exc:
            logger.warning("Analysis request to %s failed: %s", self.url, exc)
            raise TransportError(None, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            logger.warning("Analysis endpoint returned %d", response.status_code)
            raise TransportError(response.status_code, response.text)

        answer = _read_answer(response)
        try:
            data = parse_json_object(answer)
            return validate_analysis(data)
        except (MalformedResponseError, ValidationError) as exc:
            logger.warning("Rejected analysis response: %s", exc)
            raise

    def _make_client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {"follow_redirects": True}
        if self._config.timeout is not None:
            kwargs["timeout"] = httpx.Timeout(self._config.timeout)
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)


def _read_answer(response: httpx.Response) -> str:
    """Return the ``answer`` text from the response envelope."""
    try:
        envelope = response.json()
    except ValueError as exc:
        raise MalformedResponseError(f"Response body is not JSON: {exc}") from exc
    if not isinstance(envelope, dict) or not isinstance(envelope.get("answer"), str):
        raise MalformedResponseError("Response has no 'answer' text.")
    return envelope["answer"]


def validate_analysis(data: Any) -> Analysis:
    """Check a decoded payload and build the Analysis.

    ``mood``, ``summary``, ``tip`` and ``reflectionPrompt`` must be present and
    non-empty. ``cognitiveDistortions`` may be absent (empty list) but must be
    a list when present.

    Raises:
        ValidationError: On any missing field or shape mismatch.
    """
    if not isinstance(data, dict):
        raise ValidationError("Invalid analysis format received from AI.")

    missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
    if missing:
        raise ValidationError(
            f"Invalid analysis format received from AI (missing {', '.join(missing)})."
        )

    payload = dict(data)
    distortions = payload.setdefault("cognitiveDistortions", [])
    if not isinstance(distortions, list):
        raise ValidationError(
            "Invalid analysis format received from AI (cognitiveDistortions is not a list)."
        )

    try:
        return Analysis.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"Invalid analysis format received from AI: {exc}") from exc

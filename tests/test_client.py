"""Tests for AnalysisClient against a mocked endpoint."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from mindmate.client import AnalysisClient, validate_analysis
from mindmate.config import ApiConfig
from mindmate.errors import MalformedResponseError, TransportError, ValidationError
from mindmate.models import Analysis, CognitiveDistortion

API_URL = "https://analysis.example/query/"

PAYLOAD = {
    "mood": "Anxious but hopeful",
    "summary": "You had a stressful day at work but ended it with a friend.",
    "tip": "Try a five-minute breathing exercise before bed.",
    "reflectionPrompt": "What helped you feel supported today?",
    "cognitiveDistortions": [
        {
            "name": "Catastrophizing",
            "explanation": "Expecting the worst possible outcome.",
            "example": "this project is going to ruin my career",
        }
    ],
}


def _client(handler) -> AnalysisClient:
    return AnalysisClient(ApiConfig(url=API_URL), transport=httpx.MockTransport(handler))


def _answering(answer: str, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"answer": answer})

    return handler


def _analyze(client: AnalysisClient, text: str = "Today was hard.") -> Analysis:
    return asyncio.run(client.analyze(text))


class TestRequest:
    def test_posts_query_with_prompt(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"answer": json.dumps(PAYLOAD)})

        _analyze(_client(handler), "I keep thinking {everyone} is upset with me.")

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == API_URL
        assert request.headers["content-type"] == "application/json"
        assert request.headers["accept"] == "application/json"
        body = json.loads(request.content)
        assert list(body) == ["query"]
        assert "I keep thinking {everyone} is upset with me." in body["query"]
        assert "Catastrophizing" in body["query"]


class TestSuccess:
    def test_full_payload(self) -> None:
        analysis = _analyze(_client(_answering(json.dumps(PAYLOAD))))

        assert analysis.mood == PAYLOAD["mood"]
        assert analysis.summary == PAYLOAD["summary"]
        assert analysis.tip == PAYLOAD["tip"]
        assert analysis.reflection_prompt == PAYLOAD["reflectionPrompt"]
        assert analysis.cognitive_distortions == [
            CognitiveDistortion(
                name="Catastrophizing",
                explanation="Expecting the worst possible outcome.",
                example="this project is going to ruin my career",
            )
        ]

    def test_distortions_default_to_empty(self) -> None:
        payload = {k: v for k, v in PAYLOAD.items() if k != "cognitiveDistortions"}
        analysis = _analyze(_client(_answering(json.dumps(payload))))
        assert analysis.cognitive_distortions == []

    def test_prose_wrapped_answer(self) -> None:
        answer = (
            'Sure! Here is the result: {"mood":"Calm","summary":"A quiet day.",'
            '"tip":"Keep it up.","reflectionPrompt":"What felt restful?",'
            '"cognitiveDistortions":[]} Hope this helps!'
        )
        analysis = _analyze(_client(_answering(answer)))
        assert analysis.mood == "Calm"
        assert analysis.reflection_prompt == "What felt restful?"
        assert analysis.cognitive_distortions == []

    def test_fenced_answer(self) -> None:
        answer = f"```json\n{json.dumps(PAYLOAD, indent=2)}\n```"
        analysis = _analyze(_client(_answering(answer)))
        assert analysis.mood == PAYLOAD["mood"]

    def test_other_distortion_names_accepted(self) -> None:
        payload = dict(PAYLOAD)
        payload["cognitiveDistortions"] = [
            {"name": "Should Statements", "explanation": "Rigid rules.", "example": "I should"}
        ]
        analysis = _analyze(_client(_answering(json.dumps(payload))))
        assert analysis.cognitive_distortions[0].name == "Should Statements"

    def test_null_distortion_fields_become_empty(self) -> None:
        payload = dict(PAYLOAD)
        payload["cognitiveDistortions"] = [{"name": "X", "explanation": "e", "example": None}]
        analysis = _analyze(_client(_answering(json.dumps(payload))))
        assert analysis.cognitive_distortions[0].example == ""
        assert analysis.cognitive_distortions[0].explanation == "e"

    def test_deeply_nested_answer_is_malformed(self) -> None:
        answer = "{" + '"a":' + "[" * 100000 + "]" * 100000 + "}"
        with pytest.raises(MalformedResponseError):
            _analyze(_client(_answering(answer)))


class TestTransportErrors:
    def test_non_2xx_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="upstream unavailable")

        with pytest.raises(TransportError) as excinfo:
            _analyze(_client(handler))

        assert excinfo.value.status == 503
        assert excinfo.value.body == "upstream unavailable"
        assert "503" in str(excinfo.value)

    def test_connection_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError) as excinfo:
            _analyze(_client(handler))

        assert excinfo.value.status is None
        assert "connection refused" in str(excinfo.value)

    def test_user_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(TransportError) as excinfo:
            _analyze(_client(handler))

        assert excinfo.value.user_message == "Failed to get analysis from AI. API Error: 500 - boom"


class TestMalformedResponses:
    def test_no_json_in_answer(self) -> None:
        with pytest.raises(MalformedResponseError):
            _analyze(_client(_answering("I'm sorry, I can't help with that.")))

    def test_unparseable_json(self) -> None:
        with pytest.raises(MalformedResponseError, match="invalid JSON"):
            _analyze(_client(_answering('{"mood": "Calm",}')))

    def test_body_not_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(MalformedResponseError):
            _analyze(_client(handler))

    def test_missing_answer_field(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"result": json.dumps(PAYLOAD)})

        with pytest.raises(MalformedResponseError, match="answer"):
            _analyze(_client(handler))


class TestValidationErrors:
    def test_missing_tip(self) -> None:
        payload = {k: v for k, v in PAYLOAD.items() if k != "tip"}
        with pytest.raises(ValidationError, match="tip"):
            _analyze(_client(_answering(json.dumps(payload))))

    def test_empty_mood(self) -> None:
        payload = dict(PAYLOAD, mood="")
        with pytest.raises(ValidationError, match="mood"):
            _analyze(_client(_answering(json.dumps(payload))))

    def test_distortions_not_a_list(self) -> None:
        payload = dict(PAYLOAD, cognitiveDistortions="none found")
        with pytest.raises(ValidationError, match="not a list"):
            _analyze(_client(_answering(json.dumps(payload))))


class TestValidateAnalysis:
    def test_non_object_payload(self) -> None:
        with pytest.raises(ValidationError):
            validate_analysis(["mood", "summary"])

    def test_distortion_item_not_object(self) -> None:
        payload = dict(PAYLOAD, cognitiveDistortions=["Catastrophizing"])
        with pytest.raises(ValidationError):
            validate_analysis(payload)

    def test_does_not_mutate_input(self) -> None:
        payload = {k: v for k, v in PAYLOAD.items() if k != "cognitiveDistortions"}
        validate_analysis(payload)
        assert "cognitiveDistortions" not in payload

    def test_null_distortions_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_analysis(dict(PAYLOAD, cognitiveDistortions=None))

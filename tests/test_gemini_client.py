from __future__ import annotations

import json
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import httpx
import pytest

from linenguard.core.errors import (
    AuthenticationError,
    ClassificationError,
    MissingCredentialsError,
    RateLimitedError,
    ResponseSchemaError,
    ServiceUnavailableError,
)
from linenguard.infrastructure.gemini import GeminiBedClassifier


def _candidate(answer: dict | str) -> dict:
    text = answer if isinstance(answer, str) else json.dumps(answer)
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def _client_for(handler) -> tuple[GeminiBedClassifier, httpx.Client]:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return GeminiBedClassifier("test-key", model="test-model", http_client=http_client), http_client


def test_classify_sends_image_and_schema():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["key"] = request.headers.get("x-goog-api-key")
        captured["body"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(
            200,
            json=_candidate(
                {
                    "status": "UNMADE",
                    "unmadeReasons": ["pillow_misaligned", "sheet_not_tucked"],
                    "confidence": 0.97,
                    "reasoning": "Left pillow is askew.",
                }
            ),
        )

    classifier, http_client = _client_for(handler)
    verdict = classifier.classify(b"\xff\xd8\xffdata", "image/jpeg")

    assert captured["url"] == "https://generativelanguage.googleapis.com/v1beta/models/test-model:generateContent"
    assert captured["key"] == "test-key"
    body = captured["body"]
    parts = body["contents"][0]["parts"]
    assert "hotel room inspector" in parts[0]["text"]
    assert parts[1]["inline_data"]["mime_type"] == "image/jpeg"
    assert parts[1]["inline_data"]["data"] == "/9j/ZGF0YQ=="
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert "unmadeReasons" in body["generationConfig"]["responseSchema"]["properties"]

    assert verdict.status == "UNMADE"
    assert verdict.confidence == pytest.approx(0.97)
    assert verdict.unmade_reasons == ["pillow_misaligned", "sheet_not_tucked"]
    assert verdict.reasoning == "Left pillow is askew."

    http_client.close()


@pytest.mark.parametrize("status", ["made", "Made", "READY", "", None, "MADE "])
def test_non_literal_made_status_is_unmade(status):
    classifier, http_client = _client_for(
        lambda _: httpx.Response(200, json=_candidate({"status": status, "confidence": 0.95}))
    )
    assert classifier.classify(b"img", "image/png").status == "UNMADE"
    http_client.close()


def test_missing_fields_default_to_zero_confidence_and_no_reasons():
    classifier, http_client = _client_for(lambda _: httpx.Response(200, json=_candidate({"status": "UNMADE"})))
    verdict = classifier.classify(b"img", "image/png")
    assert verdict.confidence == 0.0
    assert verdict.unmade_reasons == []
    http_client.close()


def test_made_verdict_drops_reasons():
    answer = {"status": "MADE", "confidence": 0.99, "unmadeReasons": ["messy_surface"], "reason": "Looks fine"}
    classifier, http_client = _client_for(lambda _: httpx.Response(200, json=_candidate(answer)))
    verdict = classifier.classify(b"img", "image/png")
    assert verdict.status == "MADE"
    assert verdict.unmade_reasons == []
    assert verdict.reasoning == "Looks fine"
    http_client.close()


@pytest.mark.parametrize(
    "answer",
    [
        "not json at all",
        {"status": "MADE", "confidence": 1.7},
        {"status": "MADE", "confidence": "high"},
        {"status": "UNMADE", "confidence": 0.5, "unmadeReasons": "bedsheet_wrinkles"},
        '["MADE"]',
    ],
)
def test_schema_mismatch_raises(answer):
    classifier, http_client = _client_for(lambda _: httpx.Response(200, json=_candidate(answer)))
    with pytest.raises(ResponseSchemaError):
        classifier.classify(b"img", "image/png")
    http_client.close()


def test_blocked_prompt_raises_schema_error():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    classifier, http_client = _client_for(lambda _: httpx.Response(200, json=body))
    with pytest.raises(ResponseSchemaError, match="SAFETY"):
        classifier.classify(b"img", "image/png")
    http_client.close()


@pytest.mark.parametrize(
    ("status_code", "message", "expected"),
    [
        (429, "Resource has been exhausted", RateLimitedError),
        (403, "Permission denied", AuthenticationError),
        (400, "API key not valid. Please pass a valid API key.", AuthenticationError),
        (500, "Internal error", ServiceUnavailableError),
        (503, "The model is overloaded", ServiceUnavailableError),
        (404, "models/test-model is not found", ClassificationError),
    ],
)
def test_error_responses_are_classified(status_code, message, expected):
    body = {"error": {"code": status_code, "message": message}}
    classifier, http_client = _client_for(lambda _: httpx.Response(status_code, json=body))
    with pytest.raises(expected) as excinfo:
        classifier.classify(b"img", "image/png")
    assert excinfo.value.status_code == status_code
    assert message in str(excinfo.value)
    http_client.close()


def test_network_failure_is_service_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    classifier, http_client = _client_for(handler)
    with pytest.raises(ServiceUnavailableError):
        classifier.classify(b"img", "image/png")
    http_client.close()


@pytest.mark.parametrize("api_key", [None, "", "   "])
def test_missing_api_key_fails_before_any_call(api_key):
    calls: list[httpx.Request] = []
    http_client = httpx.Client(transport=httpx.MockTransport(lambda request: calls.append(request)))
    with pytest.raises(MissingCredentialsError, match="GEMINI_API_KEY"):
        GeminiBedClassifier(api_key, http_client=http_client)
    assert calls == []
    http_client.close()


@pytest.mark.parametrize(
    "body",
    [
        {"candidates": [{"content": {"parts": [{"text": 5}]}}]},
        {"candidates": [{"content": "oops"}]},
        {"candidates": {"0": 1}},
        {"candidates": [{"content": {"parts": "text"}}]},
        {"candidates": ["text"]},
    ],
    ids=["non-string-text", "content-not-object", "candidates-not-list", "parts-not-list", "candidate-not-object"],
)
def test_malformed_envelope_raises_schema_error(body):
    classifier, http_client = _client_for(lambda _: httpx.Response(200, json=body))
    with pytest.raises(ResponseSchemaError):
        classifier.classify(b"img", "image/png")
    http_client.close()


def test_only_camel_case_reasons_are_read():
    answer = {"status": "UNMADE", "confidence": 0.9, "unmade_reasons": ["messy_surface"], "unmadeReasons": ["stains_or_hair"]}
    classifier, http_client = _client_for(lambda _: httpx.Response(200, json=_candidate(answer)))
    assert classifier.classify(b"img", "image/png").unmade_reasons == ["stains_or_hair"]
    http_client.close()

"""Integration with the Gemini ``generateContent`` HTTP API."""
from __future__ import annotations

import base64
import json
import logging
from typing import Any
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from linenguard.core.errors import (
    AuthenticationError,
    ClassificationError,
    MissingCredentialsError,
    RateLimitedError,
    ResponseSchemaError,
    ServiceUnavailableError,
)
from linenguard.core.schema import ISSUE_VOCABULARY, ClassifierVerdict
from linenguard.core.settings import DEFAULT_API_BASE, DEFAULT_MODEL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

INSPECTION_PROMPT = """You are a high-end hotel room inspector. Perform a binary classification (MADE or UNMADE).
If UNMADE, you MUST identify the specific reasons from this list:
- pillow_misaligned (pillows not centered or tidy)
- bedsheet_wrinkles (visible creases or folds)
- sheet_not_tucked (corners or sides not neatly tucked under the mattress)
- stains_or_hair (any visible dirt or debris)
- runner_misplaced (the decorative bed runner is crooked or missing)
- messy_surface (the duvet or quilt is lumpy or uneven)

Return valid JSON according to the schema."""

RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "status": {
            "type": "STRING",
            "description": "Must be 'MADE' if the bed is perfectly ready for a guest, or 'UNMADE' if any issues exist.",
        },
        "unmadeReasons": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "Specific issues found if UNMADE: "
            + ", ".join(f"'{reason}'" for reason in ISSUE_VOCABULARY)
            + ". Leave empty if MADE.",
        },
        "confidence": {
            "type": "NUMBER",
            "description": "Confidence score from 0.0 to 1.0.",
        },
        "reasoning": {
            "type": "STRING",
            "description": "Brief explanation of the findings.",
        },
    },
    "required": ["status", "unmadeReasons", "confidence", "reasoning"],
}


class GeminiBedClassifier:
    """Classifies bed photos with a Gemini multimodal model."""

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_MODEL,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise MissingCredentialsError("Gemini API key is empty; set GEMINI_API_KEY to enable classification.")

        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_key = api_key.strip()
        self._model = model
        self._request_url = f"{parsed.scheme}://{parsed.netloc}/v1beta/models/{model}:generateContent"
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    @property
    def model(self) -> str:
        return self._model

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_payload(image: bytes, mime_type: str) -> dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": INSPECTION_PROMPT},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image).decode("ascii"),
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200] or response.reason_phrase
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return response.reason_phrase

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return

        status = response.status_code
        message = self._error_message(response)
        if status in (401, 403) or (status == 400 and "api key" in message.lower()):
            raise AuthenticationError(f"Gemini rejected the API key: {message}", status_code=status)
        if status == 429:
            raise RateLimitedError(f"Gemini quota exceeded: {message}", status_code=status)
        if status >= 500:
            raise ServiceUnavailableError(f"Gemini is unavailable: {message}", status_code=status)
        raise ClassificationError(f"Gemini request failed ({status}): {message}", status_code=status)

    @staticmethod
    def _extract_text(body: Any) -> str:
        if not isinstance(body, dict):
            raise ResponseSchemaError("Gemini response is not a JSON object")
        candidates = body.get("candidates") or []
        if not isinstance(candidates, list):
            raise ResponseSchemaError("Gemini candidates must be a list")
        if not candidates:
            feedback = body.get("promptFeedback") or {}
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            raise ResponseSchemaError(f"Gemini returned no candidates{f' ({reason})' if reason else ''}")

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        if not isinstance(content, dict):
            raise ResponseSchemaError("Gemini candidate has no content")
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            raise ResponseSchemaError("Gemini candidate parts must be a list")

        pieces: list[str] = []
        for part in parts:
            if not isinstance(part, dict):
                raise ResponseSchemaError("Gemini candidate part is not an object")
            text = part.get("text", "")
            if not isinstance(text, str):
                raise ResponseSchemaError("Gemini candidate text is not a string")
            pieces.append(text)
        text = "".join(pieces)
        return text or "{}"

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def classify(self, image: bytes, mime_type: str) -> ClassifierVerdict:
        payload = self._build_payload(image, mime_type)
        try:
            response = self._client.post(
                self._request_url,
                headers={"x-goog-api-key": self._api_key},
                json=payload,
            )
        except httpx.TimeoutException as exc:
            raise ServiceUnavailableError("Gemini request timed out") from exc
        except httpx.HTTPError as exc:
            raise ServiceUnavailableError(f"Could not reach Gemini: {exc}") from exc

        self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as exc:
            raise ResponseSchemaError("Gemini response body is not JSON") from exc

        text = self._extract_text(body)
        try:
            verdict = ClassifierVerdict.model_validate(json.loads(text))
        except json.JSONDecodeError as exc:
            raise ResponseSchemaError("Gemini answer is not valid JSON") from exc
        except ValidationError as exc:
            raise ResponseSchemaError(f"Gemini answer does not match the result schema: {exc}") from exc

        logger.debug("Gemini reasoning: %s", verdict.reasoning)
        return verdict

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


__all__ = ["GeminiBedClassifier", "INSPECTION_PROMPT", "RESPONSE_SCHEMA"]

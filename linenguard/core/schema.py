from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

BedStatus = Literal["MADE", "UNMADE"]
ReviewStatus = Literal["PENDING", "APPROVED", "REJECTED"]

ISSUE_VOCABULARY: tuple[str, ...] = (
    "pillow_misaligned",
    "bedsheet_wrinkles",
    "sheet_not_tucked",
    "stains_or_hair",
    "runner_misplaced",
    "messy_surface",
)


def _clean_reasons(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("unmadeReasons must be a list of strings")
    reasons: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("unmadeReasons must be a list of strings")
        item = item.strip()
        if item:
            reasons.append(item)
    return reasons


class ClassificationRecord(BaseModel):
    """A single bed inspection as stored and served to the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    room_number: str
    timestamp: int
    housekeeper_name: str
    status: BedStatus
    unmade_reasons: list[str] | None = None
    confidence: float = Field(ge=0.0, le=1.0)
    image_url: str
    reviewed_by: str | None = None
    review_status: ReviewStatus | None = None

    @field_validator("unmade_reasons", mode="before")
    @classmethod
    def _validate_reasons(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        return _clean_reasons(value)

    @model_validator(mode="after")
    def _made_has_no_reasons(self) -> "ClassificationRecord":
        if self.status == "MADE" and self.unmade_reasons:
            self.unmade_reasons = []
        return self

    @property
    def reasons(self) -> list[str]:
        return list(self.unmade_reasons or [])

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ClassifierVerdict(BaseModel):
    """Structured answer returned by the bed classifier.

    Any status other than the literal ``"MADE"`` is treated as ``"UNMADE"`` so
    that an ambiguous answer always lands in the review queue instead of being
    passed silently.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: BedStatus = "UNMADE"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    unmade_reasons: list[str] = Field(default_factory=list, alias="unmadeReasons")
    reasoning: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("classifier result must be a JSON object")
        payload = dict(data)
        payload["status"] = "MADE" if payload.get("status") == "MADE" else "UNMADE"
        if payload.get("confidence") is None:
            payload["confidence"] = 0.0
        elif isinstance(payload["confidence"], bool) or not isinstance(payload["confidence"], (int, float)):
            raise ValueError("confidence must be a number")
        payload.pop("unmade_reasons", None)
        payload["unmadeReasons"] = _clean_reasons(payload.get("unmadeReasons"))
        reasoning = payload.get("reasoning")
        if reasoning is None:
            reasoning = payload.get("reason")
        payload["reasoning"] = str(reasoning) if reasoning is not None else None
        return payload

    @model_validator(mode="after")
    def _made_has_no_reasons(self) -> "ClassifierVerdict":
        if self.status == "MADE":
            self.unmade_reasons = []
        return self

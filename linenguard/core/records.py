from __future__ import annotations

import time
import uuid

from linenguard.core.schema import ClassificationRecord, ClassifierVerdict

REVIEW_CONFIDENCE_THRESHOLD = 0.9


def now_millis() -> int:
    return int(time.time() * 1000)


def new_record_id(timestamp: int | None = None) -> str:
    stamp = now_millis() if timestamp is None else timestamp
    return f"res-{stamp}-{uuid.uuid4().hex[:8]}"


def create_record(
    verdict: ClassifierVerdict,
    *,
    room_number: str,
    housekeeper_name: str,
    image_url: str,
    record_id: str | None = None,
    timestamp: int | None = None,
) -> ClassificationRecord:
    """Build the stored inspection for a classifier verdict.

    Low-confidence verdicts are queued for a supervisor; confident ones carry
    no review state at all.
    """

    stamp = now_millis() if timestamp is None else timestamp
    return ClassificationRecord(
        id=record_id or new_record_id(stamp),
        room_number=room_number,
        timestamp=stamp,
        housekeeper_name=housekeeper_name,
        status=verdict.status,
        unmade_reasons=list(verdict.unmade_reasons),
        confidence=verdict.confidence,
        image_url=image_url,
        review_status="PENDING" if verdict.confidence < REVIEW_CONFIDENCE_THRESHOLD else None,
    )

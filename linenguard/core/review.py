from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from linenguard.core.schema import ClassificationRecord


class ReviewDecision(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


def review_updates(decision: ReviewDecision, reviewer: str | None = None) -> dict[str, Any]:
    """Fields a supervisor decision writes onto a record.

    The decision overrides the classifier for good: approving marks the bed as
    made (dropping the reported issues), rejecting marks it as unmade.
    """

    if decision is ReviewDecision.APPROVE:
        updates: dict[str, Any] = {"status": "MADE", "review_status": "APPROVED", "unmade_reasons": []}
    else:
        updates = {"status": "UNMADE", "review_status": "REJECTED"}
    if reviewer:
        updates["reviewed_by"] = reviewer
    return updates


def is_pending(record: ClassificationRecord) -> bool:
    return record.review_status == "PENDING" or record.status == "UNMADE"


def pending_reviews(records: Iterable[ClassificationRecord]) -> list[ClassificationRecord]:
    return [record for record in records if is_pending(record)]

"""Application service layer for bed inspections."""
from __future__ import annotations

import asyncio
import hashlib
import logging
from pathlib import Path

from linenguard.core.aggregation import compute_dashboard_stats
from linenguard.core.errors import ClassificationError, DuplicateSubmissionError, InvalidSubmissionError
from linenguard.core.images import detect_mime_type, find_image, save_image
from linenguard.core.records import create_record, new_record_id, now_millis
from linenguard.core.review import ReviewDecision, pending_reviews, review_updates
from linenguard.core.schema import ClassificationRecord
from linenguard.domain import DashboardStats
from linenguard.infrastructure import InMemoryKeyValueStorage, ResultStore, get_classifier

logger = logging.getLogger(__name__)


class InspectionService:
    """Coordinates capture, review and reporting use cases."""

    def __init__(self, store: ResultStore, *, image_root: Path | None = None) -> None:
        self._store = store
        self._image_root = image_root
        self._in_flight: set[str] = set()

    @property
    def store(self) -> ResultStore:
        return self._store

    @staticmethod
    def image_path(record_id: str) -> str:
        return f"/api/inspections/{record_id}/image"

    # ------------------------------------------------------------------
    # capture
    # ------------------------------------------------------------------
    async def inspect(
        self,
        image: bytes,
        *,
        room_number: str,
        housekeeper_name: str,
        mime_type: str | None = None,
    ) -> ClassificationRecord:
        """Classify one bed photo and record the result.

        Nothing is written when the classifier fails.
        """
        room_number = (room_number or "").strip()
        housekeeper_name = (housekeeper_name or "").strip()
        if not image:
            raise InvalidSubmissionError("image is required")
        if not room_number:
            raise InvalidSubmissionError("room_number is required")
        if not housekeeper_name:
            raise InvalidSubmissionError("housekeeper_name is required")

        mime_type = detect_mime_type(image, mime_type)
        key = f"{room_number}:{hashlib.sha256(image).hexdigest()}"
        if key in self._in_flight:
            raise DuplicateSubmissionError(f"room {room_number} photo is already being checked")
        self._in_flight.add(key)

        try:
            classifier = get_classifier()
            try:
                verdict = await asyncio.to_thread(classifier.classify, image, mime_type)
            except ClassificationError as exc:
                logger.warning("Classification failed for room %s: %s", room_number, exc)
                raise

            timestamp = now_millis()
            record_id = new_record_id(timestamp)
            record = create_record(
                verdict,
                room_number=room_number,
                housekeeper_name=housekeeper_name,
                image_url=self.image_path(record_id),
                record_id=record_id,
                timestamp=timestamp,
            )
            image_file = save_image(self._image_root, record_id, image, mime_type) if self._image_root is not None else None
            try:
                self._store.append(record)
            except Exception:
                if image_file is not None:
                    image_file.unlink(missing_ok=True)
                raise
            logger.info(
                "Room %s classified %s (confidence %.2f)%s",
                room_number,
                record.status,
                record.confidence,
                " and queued for review" if record.review_status == "PENDING" else "",
            )
            return record
        finally:
            self._in_flight.discard(key)

    def get_image_file(self, record_id: str) -> Path | None:
        if self._image_root is None:
            return None
        return find_image(self._image_root, record_id)

    # ------------------------------------------------------------------
    # records & review
    # ------------------------------------------------------------------
    def list_records(self) -> list[ClassificationRecord]:
        return self._store.load_all()

    def get_record(self, record_id: str) -> ClassificationRecord | None:
        return self._store.get(record_id)

    def list_pending_reviews(self) -> list[ClassificationRecord]:
        return pending_reviews(self._store.load_all())

    def set_review_decision(
        self,
        record_id: str,
        decision: ReviewDecision,
        *,
        reviewer: str | None = None,
    ) -> ClassificationRecord:
        record = self._store.update(record_id, review_updates(decision, reviewer))
        logger.info("Record %s reviewed: %s%s", record_id, decision.value, f" by {reviewer}" if reviewer else "")
        return record

    # ------------------------------------------------------------------
    # reporting
    # ------------------------------------------------------------------
    def get_dashboard_stats(self) -> DashboardStats:
        return compute_dashboard_stats(self._store.load_all())

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._store.reset()
        self._in_flight.clear()


_service = InspectionService(ResultStore(InMemoryKeyValueStorage()))


def configure_inspection_service(service: InspectionService) -> None:
    """Install the process-wide inspection service."""

    global _service
    _service = service


def get_inspection_service() -> InspectionService:
    """Return the singleton inspection service for the process."""

    return _service


def reset_inspection_state() -> None:
    """Reset the installed store (used in tests)."""

    _service.reset()

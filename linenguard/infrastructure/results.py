"""Ordered, persisted list of bed inspections."""
from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter

from linenguard.core.records import now_millis
from linenguard.core.schema import ClassificationRecord

from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

HISTORY_KEY = "linenGuard_history"

_RECORD_LIST = TypeAdapter(list[ClassificationRecord])


def seed_records(now: int | None = None) -> list[ClassificationRecord]:
    """Example inspections shown before anything has been captured."""

    stamp = now_millis() if now is None else now
    return [
        ClassificationRecord(
            id="1",
            room_number="402",
            timestamp=stamp - 1000 * 60 * 60 * 2,
            housekeeper_name="Maria Garcia",
            status="UNMADE",
            confidence=0.95,
            image_url="https://images.unsplash.com/photo-1540518614846-7eded433c457?auto=format&fit=crop&q=80&w=800",
            unmade_reasons=["bedsheet_wrinkles"],
        ),
        ClassificationRecord(
            id="2",
            room_number="105",
            timestamp=stamp - 1000 * 60 * 30,
            housekeeper_name="John Doe",
            status="MADE",
            confidence=0.99,
            image_url="https://images.unsplash.com/photo-1631049307264-da0ec9d70304?auto=format&fit=crop&q=80&w=800",
        ),
    ]


class ResultStore:
    """Single owner of the inspection history.

    Records are kept newest first and the whole list is written back to
    storage after every change.
    """

    def __init__(self, storage: KeyValueStorage, *, key: str = HISTORY_KEY) -> None:
        self._storage = storage
        self._key = key
        self._records: list[ClassificationRecord] | None = None

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    # ------------------------------------------------------------------
    # internal helpers
    # ------------------------------------------------------------------
    def _rehydrate(self) -> list[ClassificationRecord]:
        try:
            saved = self._storage.get_item(self._key)
            if saved:
                parsed = json.loads(saved)
                if not isinstance(parsed, list):
                    raise ValueError("persisted history is not a list")
                records = _RECORD_LIST.validate_python(parsed)
                ids = [record.id for record in records]
                if len(set(ids)) != len(ids):
                    raise ValueError("persisted history contains duplicate record ids")
                return records
        except (ValueError, RecursionError) as exc:
            # JSONDecodeError, UnicodeDecodeError and ValidationError are all ValueErrors.
            logger.error("Failed to parse persisted history under %r: %s; restoring seed data", self._key, exc)

        records = seed_records()
        self._write(records)
        return records

    def _ensure_loaded(self) -> list[ClassificationRecord]:
        if self._records is None:
            self._records = self._rehydrate()
        return self._records

    def _write(self, records: list[ClassificationRecord]) -> None:
        payload = [record.to_json() for record in records]
        self._storage.set_item(self._key, json.dumps(payload, ensure_ascii=False))

    @staticmethod
    def _field_name(key: str) -> str:
        for name, info in ClassificationRecord.model_fields.items():
            if key == name or key == info.alias:
                return name
        return key

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def load_all(self) -> list[ClassificationRecord]:
        return list(self._ensure_loaded())

    def get(self, record_id: str) -> ClassificationRecord | None:
        for record in self._ensure_loaded():
            if record.id == record_id:
                return record
        return None

    def append(self, record: ClassificationRecord) -> ClassificationRecord:
        records = self._ensure_loaded()
        if any(existing.id == record.id for existing in records):
            raise ValueError(f"record {record.id!r} already exists")
        self._records = [record, *records]
        self._write(self._records)
        return record

    def update(self, record_id: str, fields: dict[str, Any]) -> ClassificationRecord:
        """Merge ``fields`` into the record with ``record_id`` and persist."""

        records = self._ensure_loaded()
        updates = {self._field_name(key): value for key, value in fields.items()}
        if "id" in updates and updates["id"] != record_id:
            raise ValueError("record id cannot be changed")

        for index, record in enumerate(records):
            if record.id != record_id:
                continue
            merged = record.model_dump()
            merged.update(updates)
            updated = ClassificationRecord.model_validate(merged)
            self._records = [*records[:index], updated, *records[index + 1 :]]
            self._write(self._records)
            return updated
        raise KeyError(record_id)

    def reset(self) -> None:
        """Forget cached and persisted state (used in tests)."""

        self._storage.remove_item(self._key)
        self._records = None

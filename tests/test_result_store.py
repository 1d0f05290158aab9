from __future__ import annotations

import json
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from linenguard.core.schema import ClassificationRecord
from linenguard.infrastructure import HISTORY_KEY, InMemoryKeyValueStorage, JsonFileStorage, ResultStore, seed_records


def _record(record_id: str, status: str = "UNMADE") -> ClassificationRecord:
    return ClassificationRecord(
        id=record_id,
        room_number="301",
        timestamp=1_700_000_000_000,
        housekeeper_name="Maria Garcia",
        status=status,
        unmade_reasons=["sheet_not_tucked"] if status == "UNMADE" else None,
        confidence=0.8,
        image_url=f"/api/inspections/{record_id}/image",
        review_status="PENDING",
    )


def _persisted(storage) -> list[dict]:
    return json.loads(storage.get_item(HISTORY_KEY))


def test_first_load_without_state_seeds_and_persists():
    storage = InMemoryKeyValueStorage()
    store = ResultStore(storage)

    records = store.load_all()

    assert [record.id for record in records] == ["1", "2"]
    assert records[0].room_number == "402"
    assert records[0].unmade_reasons == ["bedsheet_wrinkles"]
    assert records[1].status == "MADE"
    assert [item["id"] for item in _persisted(storage)] == ["1", "2"]
    assert "unmadeReasons" not in _persisted(storage)[1]


DUPLICATED_HISTORY = json.dumps([record.to_json() for record in seed_records()] * 2)


@pytest.mark.parametrize(
    "saved",
    ["{not json", '{"id": "x"}', '[{"id": "x"}]', "[" * 100000 + "]" * 100000, DUPLICATED_HISTORY],
    ids=["invalid-json", "not-a-list", "invalid-record", "deeply-nested", "duplicate-ids"],
)
def test_unparseable_state_falls_back_to_seed(saved):
    storage = InMemoryKeyValueStorage()
    storage.set_item(HISTORY_KEY, saved)

    records = ResultStore(storage).load_all()

    assert [record.id for record in records] == ["1", "2"]
    assert [item["id"] for item in _persisted(storage)] == ["1", "2"]


def test_undecodable_history_file_falls_back_to_seed(tmp_path):
    (tmp_path / f"{HISTORY_KEY}.json").write_bytes(b"\xff\xfe[garbage")
    store = ResultStore(JsonFileStorage(tmp_path))

    assert [record.id for record in store.load_all()] == ["1", "2"]
    assert [record.id for record in store.load_all()] == ["1", "2"]
    persisted = json.loads((tmp_path / f"{HISTORY_KEY}.json").read_text(encoding="utf-8"))
    assert [item["id"] for item in persisted] == ["1", "2"]


def test_rehydrates_persisted_history(tmp_path):
    first = ResultStore(JsonFileStorage(tmp_path))
    first.load_all()
    first.append(_record("res-a"))

    second = ResultStore(JsonFileStorage(tmp_path))
    assert [record.id for record in second.load_all()] == ["res-a", "1", "2"]
    assert (tmp_path / f"{HISTORY_KEY}.json").exists()


def test_append_puts_record_at_head():
    store = ResultStore(InMemoryKeyValueStorage())
    before = store.load_all()

    record = _record("res-new")
    store.append(record)

    assert store.load_all() == [record, *before]


def test_append_rejects_duplicate_ids():
    store = ResultStore(InMemoryKeyValueStorage())
    store.append(_record("res-dup"))
    with pytest.raises(ValueError):
        store.append(_record("res-dup"))


def test_update_merges_and_persists():
    storage = InMemoryKeyValueStorage()
    store = ResultStore(storage)
    store.append(_record("res-1"))

    updated = store.update("res-1", {"reviewStatus": "REJECTED", "status": "UNMADE"})

    assert updated.review_status == "REJECTED"
    assert updated.room_number == "301"
    assert updated.unmade_reasons == ["sheet_not_tucked"]
    assert store.get("res-1") == updated
    assert _persisted(storage)[0]["reviewStatus"] == "REJECTED"


def test_update_unknown_id_raises_key_error():
    store = ResultStore(InMemoryKeyValueStorage())
    with pytest.raises(KeyError):
        store.update("missing", {"status": "MADE"})


def test_update_cannot_change_id():
    store = ResultStore(InMemoryKeyValueStorage())
    store.append(_record("res-1"))
    with pytest.raises(ValueError):
        store.update("res-1", {"id": "res-2"})


def test_load_all_returns_a_copy():
    store = ResultStore(InMemoryKeyValueStorage())
    snapshot = store.load_all()
    snapshot.clear()
    assert len(store.load_all()) == 2

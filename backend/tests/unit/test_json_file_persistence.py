"""Unit tests for the JSON file backend and its startup recovery."""

import json
import logging

import pytest

from resource_api.domain.entities import Note
from resource_api.infrastructure.storage import JsonFilePersistence, open_json_file_store

BASE_NAME = "notes_data"

VALID_NOTE = {
    "id": "n1",
    "title": "kept",
    "content": "c",
    "authorId": "a1",
    "dateAdded": "2024-01-01T00:00:00Z",
}


def new_note(title: str = "t") -> dict:
    return {"title": title, "content": "c", "authorId": "a1"}


def quarantine_files(directory):
    return sorted(directory.glob(f"{BASE_NAME}_backup_*.json"))


@pytest.mark.asyncio
async def test_missing_file_is_created_empty(tmp_path):
    data_dir = tmp_path / "nested" / "notes"
    store = await open_json_file_store(Note, data_dir, BASE_NAME)

    assert await store.count() == 0
    assert (data_dir / f"{BASE_NAME}.json").read_text() == "[]"


@pytest.mark.asyncio
async def test_mutations_rewrite_the_full_snapshot(tmp_path):
    store = await open_json_file_store(Note, tmp_path, BASE_NAME)
    first = await store.add(new_note("one"))
    second = await store.add(new_note("two"))
    await store.delete(first.id)

    on_disk = json.loads((tmp_path / f"{BASE_NAME}.json").read_text())
    assert on_disk == [second.to_json()]
    assert not list(tmp_path.glob(".*.tmp"))


@pytest.mark.asyncio
async def test_data_survives_reopening(tmp_path):
    store = await open_json_file_store(Note, tmp_path, BASE_NAME)
    note = await store.add(new_note())

    reopened = await open_json_file_store(Note, tmp_path, BASE_NAME)
    assert await reopened.get_by_key(note.id) == note


@pytest.mark.asyncio
async def test_corrupt_file_is_quarantined_byte_for_byte(tmp_path, caplog):
    corrupt = b'[{"id": "n1", "title": \xff broken'
    (tmp_path / f"{BASE_NAME}.json").write_bytes(corrupt)

    with caplog.at_level(logging.WARNING):
        store = await open_json_file_store(Note, tmp_path, BASE_NAME)

    assert await store.count() == 0
    quarantined = quarantine_files(tmp_path)
    assert len(quarantined) == 1
    assert quarantined[0].read_bytes() == corrupt
    assert (tmp_path / f"{BASE_NAME}.json").read_text() == "[]"
    assert any("quarantined" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_non_array_json_is_quarantined(tmp_path):
    (tmp_path / f"{BASE_NAME}.json").write_text('{"id": "n1"}')

    store = await open_json_file_store(Note, tmp_path, BASE_NAME)

    assert await store.count() == 0
    assert quarantine_files(tmp_path)[0].read_text() == '{"id": "n1"}'


@pytest.mark.asyncio
async def test_empty_file_is_reset_without_quarantine(tmp_path):
    (tmp_path / f"{BASE_NAME}.json").write_bytes(b"")

    store = await open_json_file_store(Note, tmp_path, BASE_NAME)

    assert await store.count() == 0
    assert quarantine_files(tmp_path) == []
    assert (tmp_path / f"{BASE_NAME}.json").read_text() == "[]"


@pytest.mark.asyncio
async def test_invalid_records_are_skipped(tmp_path, caplog):
    records = [VALID_NOTE, {"id": "n2", "title": 7}, "not even an object"]
    (tmp_path / f"{BASE_NAME}.json").write_text(json.dumps(records))

    with caplog.at_level(logging.ERROR):
        store = await open_json_file_store(Note, tmp_path, BASE_NAME)

    assert await store.count() == 1
    assert (await store.get_by_key("n1")).title == "kept"
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 2
    assert quarantine_files(tmp_path) == []


@pytest.mark.asyncio
async def test_record_with_out_of_range_date_is_skipped(tmp_path):
    records = [VALID_NOTE, {**VALID_NOTE, "id": "n2", "dateAdded": "0001-01-01T00:00:00+05:00"}]
    (tmp_path / f"{BASE_NAME}.json").write_text(json.dumps(records))

    store = await open_json_file_store(Note, tmp_path, BASE_NAME)

    assert await store.count() == 1
    assert (await store.get_by_key("n1")).title == "kept"


@pytest.mark.asyncio
async def test_backup_leaves_primary_file_untouched(tmp_path):
    store = await open_json_file_store(Note, tmp_path, BASE_NAME)
    await store.add(new_note())
    primary = tmp_path / f"{BASE_NAME}.json"
    before = primary.read_bytes()

    await store.backup()

    assert primary.read_bytes() == before
    backups = list((tmp_path / "backup").glob(f"{BASE_NAME}_backup_*.json"))
    assert len(backups) == 1
    assert json.loads(backups[0].read_text()) == json.loads(before)


def test_backup_filename_is_filesystem_safe(tmp_path):
    persistence = JsonFilePersistence(Note, tmp_path, BASE_NAME)
    name = persistence.backup_filename()
    assert name.startswith(f"{BASE_NAME}_backup_")
    assert name.endswith(".json")
    assert ":" not in name

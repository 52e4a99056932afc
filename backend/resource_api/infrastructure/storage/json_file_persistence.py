"""Flat-file JSON persistence: the whole collection is one JSON array on disk.

Storage layout:
    <directory>/<base_name>.json                            live data
    <directory>/<base_name>_backup_<timestamp>.json         quarantined corrupt data
    <directory>/backup/<base_name>_backup_<timestamp>.json  scheduled backups
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from resource_api.application.interfaces import Persistence
from resource_api.application.interfaces.entity_store import T
from resource_api.domain.exceptions import InvalidInputError
from resource_api.infrastructure.storage.memory_store import InMemoryEntityStore

logger = logging.getLogger(__name__)

FILE_EXTENSION = "json"
BACKUP_DIR_NAME = "backup"


def _timestamp() -> str:
    """UTC timestamp that is safe to embed in a filename on any platform."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def _write_atomic(path: Path, content: str) -> None:
    """Write ``content`` to a sibling temp file, then move it over ``path``.

    A crash mid-write leaves the previous file intact.
    """
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_text(content, encoding="utf-8")
    os.replace(tmp_path, path)


class JsonFilePersistence(Persistence[T]):
    """Rewrites the full JSON snapshot after every mutation."""

    def __init__(self, entity_cls: type[T], directory: str | Path, base_name: str):
        self._entity_cls = entity_cls
        self._directory = Path(directory)
        self._base_name = base_name

    @property
    def data_path(self) -> Path:
        return self._directory / f"{self._base_name}.{FILE_EXTENSION}"

    @property
    def backup_dir(self) -> Path:
        return self._directory / BACKUP_DIR_NAME

    def backup_filename(self) -> str:
        return f"{self._base_name}_backup_{_timestamp()}.{FILE_EXTENSION}"

    async def load(self) -> list[T]:
        """Read the data file, recovering from corrupt content.

        Individual records that fail validation are logged and skipped.
        When the file as a whole is not a JSON array, its raw bytes are
        copied to a timestamped quarantine file and the data file is reset
        to an empty array.
        """
        self._directory.mkdir(parents=True, exist_ok=True)
        self.data_path.touch(exist_ok=True)
        raw_bytes = self.data_path.read_bytes()

        try:
            records = json.loads(raw_bytes.decode("utf-8"))
            if not isinstance(records, list):
                raise ValueError(f"expected a JSON array, got {type(records).__name__}")
        except ValueError as exc:
            if raw_bytes:
                quarantine_path = self._directory / self.backup_filename()
                quarantine_path.write_bytes(raw_bytes)
                logger.warning(
                    "Invalid data in %s (%s); quarantined %d bytes to %s",
                    self.data_path,
                    exc,
                    len(raw_bytes),
                    quarantine_path,
                )
            else:
                logger.info("No data in %s, starting empty", self.data_path)
            _write_atomic(self.data_path, "[]")
            return []

        entities: list[T] = []
        for record in records:
            try:
                entities.append(self._entity_cls.from_json(record))
            except InvalidInputError as exc:
                logger.error(
                    "Skipping invalid %s record in %s: %s",
                    self._entity_cls.entity_type,
                    self.data_path,
                    exc,
                )
        return entities

    async def saved(self, entity: T, snapshot: list[T], previous_key: str | None = None) -> None:
        self._write_snapshot(snapshot)

    async def deleted(self, entity: T, snapshot: list[T]) -> None:
        self._write_snapshot(snapshot)

    async def backup(self, snapshot: list[T]) -> None:
        self.backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path = self.backup_dir / self.backup_filename()
        backup_path.write_text(self._serialize(snapshot), encoding="utf-8")
        logger.info(
            "Backed up %d %s record(s) to %s",
            len(snapshot),
            self._entity_cls.entity_type,
            backup_path,
        )

    def _write_snapshot(self, snapshot: list[T]) -> None:
        _write_atomic(self.data_path, self._serialize(snapshot))

    @staticmethod
    def _serialize(snapshot: list[T]) -> str:
        return json.dumps([entity.to_json() for entity in snapshot], ensure_ascii=False)


async def open_json_file_store(
    entity_cls: type[T],
    directory: str | Path,
    base_name: str,
    **store_kwargs: Any,
) -> InMemoryEntityStore[T]:
    """Run the startup recovery protocol and return a file-backed store."""
    persistence = JsonFilePersistence(entity_cls, directory, base_name)
    return await InMemoryEntityStore.open(entity_cls, persistence, **store_kwargs)

"""Application service for file details: metadata about stored files.

Binary uploads are handled elsewhere; this service only keeps the
metadata records, keyed by the stored (sanitised) filename.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from resource_api.application.interfaces import DEFAULT_PAGE, EntityStore, Page, SortOption
from resource_api.domain.entities import FileDetails, sanitize_filename
from resource_api.domain.exceptions import InvalidInputError, NotFoundError
from resource_api.domain.validation import ROOT, Field, is_boolean, is_string, validate_fields

logger = logging.getLogger(__name__)

MISSING_FILE_ERROR = "File Does Not Exist In Database"

_UPDATE_FIELDS = (
    Field("originalFilename", is_string, required=False),
    Field("isPrivate", is_boolean, required=False),
)


@dataclass
class FileDeleteResult:
    """Outcome of deleting one filename in a bulk delete."""

    filename: str
    file_details: FileDetails | None = None
    errors: list[str] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        output: dict[str, Any] = {"filename": self.filename, "errors": list(self.errors)}
        if self.file_details is not None:
            output["fileDetails"] = self.file_details.to_json()
        return output


def parse_sort(value: str | None) -> SortOption | None:
    """Map a ``sortBy`` query value to a sort option; unknown values mean default."""
    try:
        return SortOption(value)
    except ValueError:
        return None


class FileDataService:
    """Orchestrates file details operations over the entity store port."""

    def __init__(self, store: EntityStore[FileDetails]):
        self._store = store

    async def get_file_list(
        self,
        page: int = DEFAULT_PAGE,
        pagination: int | None = None,
        sort_by: str | None = None,
    ) -> Page[FileDetails]:
        return await self._store.get_list(
            page=page, page_size=pagination, sort=parse_sort(sort_by)
        )

    async def get_total_files(self) -> int:
        return await self._store.count()

    async def get_file_by_name(self, filename: str) -> FileDetails:
        return await self._store.get_by_key(filename)

    async def add_files(self, raw: Any) -> list[FileDetails]:
        """Add one details record per payload element.

        Every element is validated before any is stored, so a bad element
        leaves the collection untouched.
        """
        if not isinstance(raw, list):
            raise InvalidInputError("Expected a list of file details", [ROOT])

        payloads = [self._with_safe_filename(item) for item in raw]
        for payload in payloads:
            FileDetails.ensure_valid_new(payload)
        await self._ensure_new_filenames([payload["filename"] for payload in payloads])

        added = [await self._store.add(payload) for payload in payloads]
        logger.info("Added %d file record(s)", len(added))
        return added

    async def update_file(self, filename: str, raw: Any) -> FileDetails:
        """Change the user-editable fields (``originalFilename``, ``isPrivate``)."""
        invalid = validate_fields(raw, _UPDATE_FIELDS)
        if invalid:
            raise InvalidInputError(f"Invalid file update: {', '.join(invalid)}", invalid)

        details = await self._store.get_by_key(filename)
        updated = details.with_changes(
            original_filename=raw.get("originalFilename"),
            is_private=raw.get("isPrivate"),
        )
        return await self._store.update(updated)

    async def delete_files(self, filenames: Any) -> list[FileDeleteResult]:
        """Delete every named record, reporting a per-name error for missing ones."""
        if not isinstance(filenames, list) or not all(isinstance(n, str) for n in filenames):
            raise InvalidInputError("Expected a list of filenames", [ROOT])

        results = []
        for filename in filenames:
            try:
                details = await self._store.delete(filename)
            except NotFoundError:
                results.append(FileDeleteResult(filename, errors=[MISSING_FILE_ERROR]))
            else:
                results.append(FileDeleteResult(filename, file_details=details))
        return results

    async def _ensure_new_filenames(self, filenames: list[str]) -> None:
        seen: set[str] = set()
        for filename in filenames:
            if filename in seen or await self._exists(filename):
                raise InvalidInputError(f"Duplicate filename: {filename}", ["filename"])
            seen.add(filename)

    async def _exists(self, filename: str) -> bool:
        try:
            await self._store.get_by_key(filename)
        except NotFoundError:
            return False
        return True

    @staticmethod
    def _with_safe_filename(item: Any) -> Any:
        if isinstance(item, Mapping) and isinstance(item.get("filename"), str):
            return {**item, "filename": sanitize_filename(item["filename"])}
        return item

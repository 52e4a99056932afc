"""File details entity: metadata about a stored file, keyed by its stored filename."""

import re
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, ClassVar

from resource_api.domain.entities.base import Entity
from resource_api.domain.validation import (
    Field,
    format_datetime,
    is_boolean,
    is_flat_metadata,
    is_non_empty_string,
    is_number,
    is_string,
    is_valid_date_string,
    parse_datetime,
)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_REPEATED_UNDERSCORES = re.compile(r"_+")


def sanitize_filename(filename: str) -> str:
    """Replace runs of unsafe characters with a single underscore."""
    return _REPEATED_UNDERSCORES.sub("_", _UNSAFE_CHARS.sub("_", filename))


@dataclass(frozen=True)
class FileDetails(Entity):
    """Metadata for one stored file."""

    original_filename: str
    filename: str
    date_added: datetime
    author_id: str
    mimetype: str
    size: int | float
    is_private: bool
    # sorted (key, value) pairs
    metadata: tuple[tuple[str, str | int | float | bool], ...] = ()

    entity_type: ClassVar[str] = "File"
    key_field: ClassVar[str] = "filename"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("originalFilename", is_string),
        Field("filename", is_non_empty_string),
        Field("dateAdded", is_valid_date_string),
        Field("authorId", is_string),
        Field("mimetype", is_string),
        Field("size", is_number),
        Field("isPrivate", is_boolean),
        Field("metadata", is_flat_metadata),
    )
    defaulted_on_create: ClassVar[frozenset[str]] = frozenset({"dateAdded", "metadata"})

    @property
    def key(self) -> str:
        return self.filename

    @property
    def sort_date(self) -> datetime:
        return self.date_added

    @property
    def sort_name(self) -> str:
        return self.original_filename

    def with_changes(
        self,
        original_filename: str | None = None,
        is_private: bool | None = None,
    ) -> "FileDetails":
        """Return a copy with the user-editable fields replaced."""
        return replace(
            self,
            original_filename=(
                self.original_filename if original_filename is None else original_filename
            ),
            is_private=self.is_private if is_private is None else is_private,
        )

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "FileDetails":
        date_added = (
            parse_datetime(raw["dateAdded"]) if "dateAdded" in raw else datetime.now(timezone.utc)
        )
        return cls(
            id=raw["id"],
            original_filename=raw["originalFilename"],
            filename=raw["filename"],
            date_added=date_added,
            author_id=raw["authorId"],
            mimetype=raw["mimetype"],
            size=raw["size"],
            is_private=raw["isPrivate"],
            metadata=tuple(sorted(raw.get("metadata", {}).items())),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "originalFilename": self.original_filename,
            "filename": self.filename,
            "dateAdded": format_datetime(self.date_added),
            "authorId": self.author_id,
            "mimetype": self.mimetype,
            "size": self.size,
            "isPrivate": self.is_private,
            "metadata": dict(self.metadata),
        }

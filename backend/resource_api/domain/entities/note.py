"""Note entity."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar

from resource_api.domain.entities.base import Entity
from resource_api.domain.validation import (
    Field,
    format_datetime,
    is_string,
    is_valid_date_string,
    parse_datetime,
)


@dataclass(frozen=True)
class Note(Entity):
    """A private note, keyed by its id."""

    title: str
    content: str
    author_id: str
    date_added: datetime
    update_author_id: str | None = None
    date_updated: datetime | None = None

    entity_type: ClassVar[str] = "Note"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("title", is_string),
        Field("content", is_string),
        Field("authorId", is_string),
        Field("dateAdded", is_valid_date_string),
        Field("updateAuthorId", is_string, required=False),
        Field("dateUpdated", is_valid_date_string, required=False),
    )
    defaulted_on_create: ClassVar[frozenset[str]] = frozenset({"dateAdded"})

    @property
    def sort_date(self) -> datetime:
        return self.date_added

    @property
    def sort_name(self) -> str:
        return self.title

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "Note":
        date_added = (
            parse_datetime(raw["dateAdded"]) if "dateAdded" in raw else datetime.now(timezone.utc)
        )
        date_updated = parse_datetime(raw["dateUpdated"]) if "dateUpdated" in raw else None
        return cls(
            id=raw["id"],
            title=raw["title"],
            content=raw["content"],
            author_id=raw["authorId"],
            date_added=date_added,
            update_author_id=raw.get("updateAuthorId"),
            date_updated=date_updated,
        )

    def to_json(self) -> dict[str, Any]:
        output: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "authorId": self.author_id,
            "dateAdded": format_datetime(self.date_added),
        }
        if self.update_author_id is not None:
            output["updateAuthorId"] = self.update_author_id
        if self.date_updated is not None:
            output["dateUpdated"] = format_datetime(self.date_updated)
        return output

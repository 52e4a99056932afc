"""Blog post entity."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar

from resource_api.domain.entities.base import Entity
from resource_api.domain.validation import (
    Field,
    format_datetime,
    is_non_empty_string,
    is_string,
    is_string_list,
    is_valid_date_string,
    parse_datetime,
)


class BlogStatus(str, Enum):
    """Publication state of a blog post."""

    POSTED = "posted"
    DRAFT = "draft"

    @classmethod
    def from_value(cls, value: Any) -> "BlogStatus":
        """Anything other than ``draft`` counts as posted."""
        return cls.DRAFT if value == cls.DRAFT.value else cls.POSTED


@dataclass(frozen=True)
class BlogPost(Entity):
    """A blog post, looked up by its slug."""

    title: str
    slug: str
    body: str
    tags: tuple[str, ...]
    author_id: str
    date_added: datetime
    status: BlogStatus = BlogStatus.POSTED
    update_author_id: str | None = None
    date_updated: datetime | None = None

    entity_type: ClassVar[str] = "Blog Post"
    key_field: ClassVar[str] = "slug"
    schema: ClassVar[tuple[Field, ...]] = (
        Field("title", is_string),
        Field("slug", is_non_empty_string),
        Field("body", is_string),
        Field("tags", is_string_list),
        Field("authorId", is_string),
        Field("dateAdded", is_valid_date_string),
        Field("status", is_string, required=False),
        Field("updateAuthorId", is_string, required=False),
        Field("dateUpdated", is_valid_date_string, required=False),
    )
    defaulted_on_create: ClassVar[frozenset[str]] = frozenset({"dateAdded"})

    @property
    def key(self) -> str:
        return self.slug

    @property
    def sort_date(self) -> datetime:
        return self.date_added

    @property
    def sort_name(self) -> str:
        return self.title

    @property
    def is_posted(self) -> bool:
        return self.status is BlogStatus.POSTED

    @classmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> "BlogPost":
        date_added = (
            parse_datetime(raw["dateAdded"]) if "dateAdded" in raw else datetime.now(timezone.utc)
        )
        date_updated = parse_datetime(raw["dateUpdated"]) if "dateUpdated" in raw else None
        return cls(
            id=raw["id"],
            title=raw["title"],
            slug=raw["slug"],
            body=raw["body"],
            tags=tuple(raw["tags"]),
            author_id=raw["authorId"],
            date_added=date_added,
            status=BlogStatus.from_value(raw.get("status")),
            update_author_id=raw.get("updateAuthorId"),
            date_updated=date_updated,
        )

    def to_json(self) -> dict[str, Any]:
        output: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "body": self.body,
            "tags": list(self.tags),
            "authorId": self.author_id,
            "dateAdded": format_datetime(self.date_added),
            "status": self.status.value,
        }
        if self.update_author_id is not None:
            output["updateAuthorId"] = self.update_author_id
        if self.date_updated is not None:
            output["dateUpdated"] = format_datetime(self.date_updated)
        return output

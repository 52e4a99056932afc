"""Base class for validated, JSON-serialisable domain entities."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, ClassVar, Self

from resource_api.domain.exceptions import InvalidInputError
from resource_api.domain.validation import ROOT, Field, is_string, validate_fields

ID_FIELD = Field("id", is_string)


@dataclass(frozen=True)
class Entity(ABC):
    """Immutable record with strict JSON (de)serialisation.

    Subclasses declare ``schema`` (the JSON field rules, ``id`` excluded) and
    implement ``_from_valid_json`` / ``to_json``. Construction from untrusted
    input always goes through ``from_json`` or ``from_new_json`` which
    validate every field before building anything.
    """

    id: str

    entity_type: ClassVar[str] = "Entity"
    key_field: ClassVar[str] = "id"
    schema: ClassVar[tuple[Field, ...]] = ()
    # Fields the server fills in when a creation payload leaves them out
    defaulted_on_create: ClassVar[frozenset[str]] = frozenset()

    @property
    def key(self) -> str:
        """Natural key used for lookup inside a store."""
        return self.id

    @property
    def sort_date(self) -> datetime | None:
        return None

    @property
    def sort_name(self) -> str:
        return self.key

    @classmethod
    def fields(cls) -> tuple[Field, ...]:
        """Rules for a stored entity: ``id`` plus the kind's schema."""
        return (ID_FIELD, *cls.schema)

    @classmethod
    def creation_fields(cls) -> tuple[Field, ...]:
        """Rules for a creation payload: no ``id``, server-defaulted fields optional."""
        return tuple(
            replace(rule, required=False) if rule.name in cls.defaulted_on_create else rule
            for rule in cls.schema
        )

    @classmethod
    def validate(cls, raw: Any) -> list[str]:
        return validate_fields(raw, cls.fields())

    @classmethod
    def from_json(cls, raw: Any) -> Self:
        """Build an entity from stored JSON, raising ``InvalidInputError`` on any bad field."""
        invalid = cls.validate(raw)
        if invalid:
            raise InvalidInputError(
                f"Invalid {cls.entity_type}: {', '.join(invalid)}", invalid
            )
        return cls._from_valid_json(raw)

    @classmethod
    def ensure_valid_new(cls, raw: Any) -> None:
        """Raise ``InvalidInputError`` unless ``raw`` is a valid creation payload."""
        invalid = validate_fields(raw, cls.creation_fields())
        if invalid:
            raise InvalidInputError(
                f"Invalid new {cls.entity_type}: {', '.join(invalid)}", invalid
            )

    @classmethod
    def from_new_json(cls, raw: Any, id: str) -> Self:
        """Build a new entity from a creation payload and a server-issued id.

        Any ``id`` supplied by the caller is ignored.
        """
        cls.ensure_valid_new(raw)
        return cls._from_valid_json({**raw, "id": id})

    def with_json(self, raw: Any) -> Self:
        """Overlay a partial JSON update on this entity. The id never changes."""
        if not isinstance(raw, Mapping):
            raise InvalidInputError(f"Invalid {self.entity_type}: {ROOT}", [ROOT])
        return type(self).from_json({**self.to_json(), **raw, "id": self.id})

    @classmethod
    @abstractmethod
    def _from_valid_json(cls, raw: dict[str, Any]) -> Self:
        """Construct from input that already passed validation."""
        ...

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """Serialise to the JSON shape accepted by ``from_json``."""
        ...

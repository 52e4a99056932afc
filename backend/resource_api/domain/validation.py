"""Schema-driven validation of untyped JSON input.

Every entity kind declares its JSON shape once as a tuple of ``Field`` rules.
``validate_fields`` evaluates the rules against raw input and returns the
names of all fields that fail, so callers can report every problem at once.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

Predicate = Callable[[Any], bool]

ROOT = "root"


@dataclass(frozen=True)
class Field:
    """One JSON field rule: the key, its type predicate, and whether it must be present."""

    name: str
    predicate: Predicate
    required: bool = True


# ── Predicates ──────────────────────────────────────────────────────


def is_record(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_number(value: Any) -> bool:
    # bool is an int subclass, JSON booleans are not numbers
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def is_flat_metadata(value: Any) -> bool:
    """A JSON object whose values are all strings, numbers or booleans."""
    if not is_record(value):
        return False
    return all(isinstance(v, (str, int, float, bool)) for v in value.values())


def is_valid_date_string(value: Any) -> bool:
    return isinstance(value, str) and parse_datetime(value) is not None


def one_of(*choices: str, case_sensitive: bool = True) -> Predicate:
    """Build a predicate accepting only the given string values."""
    allowed = set(choices) if case_sensitive else {c.lower() for c in choices}

    def _check(value: Any) -> bool:
        if not isinstance(value, str):
            return False
        return (value if case_sensitive else value.lower()) in allowed

    return _check


# ── Helpers ─────────────────────────────────────────────────────────


def parse_datetime(value: str) -> datetime | None:
    """Parse an ISO-8601 string into an aware datetime, or None when invalid.

    A trailing ``Z`` is accepted, naive values are treated as UTC and the
    result is normalised to UTC.
    """
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        # Offsets near datetime.min/max can push the UTC value out of range
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def format_datetime(value: datetime) -> str:
    """Render an aware datetime as UTC ISO-8601 with a ``Z`` suffix."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat().replace("+00:00", "Z")


def validate_fields(raw: Any, fields: tuple[Field, ...]) -> list[str]:
    """Return the names of every field in ``raw`` that fails its rule.

    Optional fields may be absent; when present they must pass the predicate.
    Returns ``["root"]`` when ``raw`` is not a JSON object.
    """
    if not is_record(raw):
        return [ROOT]

    invalid: list[str] = []
    for rule in fields:
        if rule.name not in raw:
            if rule.required:
                invalid.append(rule.name)
            continue
        if not rule.predicate(raw[rule.name]):
            invalid.append(rule.name)
    return invalid

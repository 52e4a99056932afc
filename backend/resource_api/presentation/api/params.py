"""Lenient query-string parsing shared by the v1 endpoints."""

from dataclasses import dataclass

from fastapi import Query

from resource_api.application.interfaces import DEFAULT_PAGE
from resource_api.domain.exceptions import InvalidInputError


def int_from_string(value: str | None) -> int | None:
    """Parse an integer query value; anything unparsable means "use the default"."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class PageParams:
    page: int
    pagination: int | None


def page_params(
    page: str | None = Query(None),
    pagination: str | None = Query(None),
) -> PageParams:
    """``page``/``pagination`` as sent; the store clamps invalid values to its defaults."""
    return PageParams(
        page=int_from_string(page) or DEFAULT_PAGE,
        pagination=int_from_string(pagination),
    )


def require_param(value: str | None, name: str) -> str:
    if not value:
        raise InvalidInputError(f"Invalid {name}", [name])
    return value

"""Application service (use case) for blog posts."""

import logging
from typing import Any

from resource_api.application.interfaces import DEFAULT_PAGE, EntityStore, Page
from resource_api.domain.entities import BlogPost

logger = logging.getLogger(__name__)


def _is_posted(post: BlogPost) -> bool:
    return post.is_posted


class BlogService:
    """Blog posts are looked up by slug; drafts are hidden from the public listing."""

    def __init__(self, store: EntityStore[BlogPost]):
        self._store = store

    async def get_posts(
        self, page: int = DEFAULT_PAGE, pagination: int | None = None
    ) -> Page[BlogPost]:
        return await self._store.get_list(page=page, page_size=pagination, where=_is_posted)

    async def get_all_posts(
        self, page: int = DEFAULT_PAGE, pagination: int | None = None
    ) -> Page[BlogPost]:
        return await self._store.get_list(page=page, page_size=pagination)

    async def find_by_slug(self, slug: str) -> BlogPost:
        return await self._store.get_by_key(slug)

    async def add_post(self, raw: Any) -> BlogPost:
        return await self._store.add(raw)

    async def update_post(self, slug: str, raw: Any) -> BlogPost:
        """Apply ``raw`` to the post at ``slug``. A new ``slug`` in ``raw`` renames it."""
        existing = await self._store.get_by_key(slug)
        post = await self._store.update(existing.with_json(raw), previous_key=slug)
        if post.slug != slug:
            logger.info("Blog post slug changed from '%s' to '%s'", slug, post.slug)
        return post

    async def delete_post(self, slug: str) -> BlogPost:
        return await self._store.delete(slug)

"""Blog post endpoints. Posts are addressed by slug."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from resource_api.application.interfaces import Page
from resource_api.application.services import BlogService
from resource_api.domain.entities import BlogPost
from resource_api.infrastructure.dependencies import get_blog_service
from resource_api.presentation.api.params import PageParams, page_params

router = APIRouter(prefix="/blog", tags=["Blog"])


def _page_json(result: Page[BlogPost]) -> dict:
    return {
        "posts": [post.to_json() for post in result.items],
        "morePages": result.more_pages,
    }


@router.get("")
async def list_posts(
    include_drafts: bool = Query(False, alias="includeDrafts"),
    params: PageParams = Depends(page_params),
    service: BlogService = Depends(get_blog_service),
) -> dict:
    """Published posts, newest first. ``includeDrafts=true`` lists drafts too."""
    if include_drafts:
        return _page_json(await service.get_all_posts(params.page, params.pagination))
    return _page_json(await service.get_posts(params.page, params.pagination))


@router.get("/{slug}")
async def get_post(
    slug: str,
    service: BlogService = Depends(get_blog_service),
) -> dict:
    post = await service.find_by_slug(slug)
    return post.to_json()


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_post(
    raw: Any = Body(None),
    service: BlogService = Depends(get_blog_service),
) -> dict:
    post = await service.add_post(raw)
    return post.to_json()


@router.put("/{slug}")
async def update_post(
    slug: str,
    raw: Any = Body(None),
    service: BlogService = Depends(get_blog_service),
) -> dict:
    """Update a post. Sending a different ``slug`` moves the post to that slug."""
    post = await service.update_post(slug, raw)
    return post.to_json()


@router.delete("/{slug}")
async def delete_post(
    slug: str,
    service: BlogService = Depends(get_blog_service),
) -> dict:
    post = await service.delete_post(slug)
    return post.to_json()

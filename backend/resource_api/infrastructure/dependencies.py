"""FastAPI dependency injection: wires the store registry to application services."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request

from resource_api.application.services import (
    BlogService,
    FileDataService,
    NoteService,
    ViceBankService,
)
from resource_api.infrastructure.storage.factory import StoreRegistry


def get_stores(request: Request) -> StoreRegistry:
    """The registry built during the application lifespan."""
    return request.app.state.stores


async def get_note_service(
    stores: StoreRegistry = Depends(get_stores),
) -> AsyncGenerator[NoteService, None]:
    yield NoteService(stores["notes"])


async def get_blog_service(
    stores: StoreRegistry = Depends(get_stores),
) -> AsyncGenerator[BlogService, None]:
    yield BlogService(stores["blog_posts"])


async def get_file_data_service(
    stores: StoreRegistry = Depends(get_stores),
) -> AsyncGenerator[FileDataService, None]:
    yield FileDataService(stores["files"])


async def get_vice_bank_service(
    stores: StoreRegistry = Depends(get_stores),
) -> AsyncGenerator[ViceBankService, None]:
    """Provides a ViceBankService with all six vice bank stores wired up."""
    yield ViceBankService(
        users=stores["vice_bank_users"],
        deposits=stores["deposits"],
        purchases=stores["purchases"],
        purchase_prices=stores["purchase_prices"],
        tasks=stores["tasks"],
        task_deposits=stores["task_deposits"],
    )

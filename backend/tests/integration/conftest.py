"""Shared fixtures: an app wired to fresh in-memory stores and an HTTP client for it."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from resource_api.config import Settings
from resource_api.infrastructure.storage import STORE_SPECS, InMemoryEntityStore, StoreRegistry
from resource_api.main import create_app


def memory_registry() -> StoreRegistry:
    return StoreRegistry(
        {
            name: InMemoryEntityStore(
                spec.entity_cls,
                default_sort=spec.default_sort,
                default_page_size=spec.default_page_size,
            )
            for name, spec in STORE_SPECS.items()
        }
    )


@pytest.fixture
def app():
    application = create_app(Settings(_env_file=None))
    # ASGITransport does not run the lifespan, so stores are attached directly
    application.state.stores = memory_registry()
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

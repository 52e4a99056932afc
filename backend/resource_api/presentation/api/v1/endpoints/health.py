"""Health check endpoint: reports the version and which backend each store runs on."""

from fastapi import APIRouter, Depends

from resource_api.application.schemas import HealthResponse
from resource_api.config import get_settings
from resource_api.infrastructure.dependencies import get_stores
from resource_api.infrastructure.storage.factory import StoreRegistry

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(stores: StoreRegistry = Depends(get_stores)) -> HealthResponse:
    """Returns the current application health status."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.app_env,
        stores={name: type(store.persistence).__name__ for name, store in stores.items()},
    )

"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resource_api.application.services import BackupScheduler
from resource_api.config import Settings, get_settings
from resource_api.infrastructure.logging import LogCycler, setup_logging
from resource_api.infrastructure.storage import build_stores
from resource_api.presentation.api.errors import register_exception_handlers
from resource_api.presentation.api.middleware import RequestLogMiddleware
from resource_api.presentation.api.v1.router import router as v1_router

logger = logging.getLogger(__name__)


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan: configure logging, open every store, start the schedulers."""
        file_handler = setup_logging(settings)

        # 1. Build one store per entity kind on its configured backend
        stores = await build_stores(settings.storage_settings())
        app.state.stores = stores

        # 2. Periodic backups of every store
        scheduler = BackupScheduler(dict(stores.items()), settings.backup_frequency_hours)
        await scheduler.start()

        # 3. Log rotation, only when logging to a file
        cycler = None
        if file_handler is not None:
            cycler = LogCycler(
                file_handler,
                max_bytes=settings.log_max_size_bytes,
                interval_minutes=settings.log_cycle_interval_minutes,
            )
            await cycler.start()

        logger.info("%s %s started (%s)", settings.app_title, settings.app_version, settings.app_env)
        yield

        # Shutdown
        if cycler is not None:
            await cycler.stop()
        await scheduler.stop()
        await stores.close()

    return lifespan


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=_lifespan(settings),
    )

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(v1_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "resource_api.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )

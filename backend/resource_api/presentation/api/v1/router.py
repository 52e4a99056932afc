"""V1 API router: every resource module under one versioned prefix."""

from fastapi import APIRouter

from resource_api.presentation.api.v1.endpoints.health import router as health_router
from resource_api.presentation.api.v1.endpoints.notes import router as notes_router
from resource_api.presentation.api.v1.endpoints.blog import router as blog_router
from resource_api.presentation.api.v1.endpoints.files import router as files_router
from resource_api.presentation.api.v1.endpoints.vice_bank import router as vice_bank_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(notes_router)
router.include_router(blog_router)
router.include_router(files_router)
router.include_router(vice_bank_router)

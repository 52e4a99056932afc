"""Pydantic DTOs for the health endpoint."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Schema returned by ``GET /api/v1/health``."""

    status: str = Field(..., examples=["healthy"])
    version: str
    environment: str
    stores: dict[str, str] = Field(
        default_factory=dict,
        description="Persistence strategy behind each store",
        examples=[{"notes": "JsonFilePersistence"}],
    )

"""File details endpoints: listing, totals, metadata updates and bulk delete."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from resource_api.application.interfaces import normalize_page
from resource_api.application.services import FileDataService
from resource_api.infrastructure.dependencies import get_file_data_service
from resource_api.infrastructure.storage.factory import FILE_LIST_PAGE_SIZE
from resource_api.presentation.api.params import PageParams, page_params

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/list")
async def list_files(
    params: PageParams = Depends(page_params),
    sort_by: str | None = Query(None, alias="sortBy"),
    service: FileDataService = Depends(get_file_data_service),
) -> dict:
    """One page of file details plus the overall total."""
    result = await service.get_file_list(params.page, params.pagination, sort_by)
    total = await service.get_total_files()
    return {
        "files": [details.to_json() for details in result.items],
        "totalFiles": total,
        "page": normalize_page(params.page, 1),
        "pagination": normalize_page(params.pagination, FILE_LIST_PAGE_SIZE),
        "morePages": result.more_pages,
    }


@router.get("/total")
async def total_files(service: FileDataService = Depends(get_file_data_service)) -> dict:
    return {"totalFiles": await service.get_total_files()}


@router.get("/details/{filename}")
async def get_file_details(
    filename: str,
    service: FileDataService = Depends(get_file_data_service),
) -> dict:
    details = await service.get_file_by_name(filename)
    return details.to_json()


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_files(
    raw: Any = Body(None),
    service: FileDataService = Depends(get_file_data_service),
) -> dict:
    """Register metadata for a batch of stored files."""
    added = await service.add_files(raw)
    return {"files": [details.to_json() for details in added]}


@router.put("/details/{filename}")
async def update_file_details(
    filename: str,
    raw: Any = Body(None),
    service: FileDataService = Depends(get_file_data_service),
) -> dict:
    """Change ``originalFilename`` and/or ``isPrivate``."""
    details = await service.update_file(filename, raw)
    return details.to_json()


@router.post("/delete")
async def delete_files(
    raw: Any = Body(None),
    service: FileDataService = Depends(get_file_data_service),
) -> list[dict]:
    """Delete a list of filenames; missing names are reported per entry, not as an error."""
    results = await service.delete_files(raw)
    return [result.to_json() for result in results]

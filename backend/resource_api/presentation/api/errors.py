"""Translate domain exceptions into HTTP responses."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from resource_api.domain.exceptions import InvalidInputError, NotFoundError

SERVER_ERROR_DETAIL = "Server Error"


async def invalid_input_handler(request: Request, exc: InvalidInputError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": exc.message, "invalidFields": exc.fields},
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


def server_error_response() -> JSONResponse:
    """Generic 500 body; never includes exception details."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": SERVER_ERROR_DETAIL},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidInputError, invalid_input_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)

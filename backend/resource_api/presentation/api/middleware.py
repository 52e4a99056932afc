"""HTTP middleware: request logging and the last-resort error boundary."""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from resource_api.presentation.api.errors import server_error_response

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Log ``client - METHOD - path - status`` for every request.

    Exceptions no handler claimed are logged here once and answered with a
    generic 500.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        client = request.client.host if request.client else "-"
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled error for %s %s", request.method, request.url.path
            )
            response = server_error_response()

        logger.info(
            "%s - %s - %s - %d",
            client,
            request.method,
            request.url.path,
            response.status_code,
        )
        return response

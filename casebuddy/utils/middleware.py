"""Middleware for request handling and error processing."""

import logging
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import settings
from .errors import convert_exception

logger = logging.getLogger(__name__)


def _level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.DEBUG


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turns any exception escaping a route into a JSON error response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            error = convert_exception(exc)
            # Quota and validation failures are expected outcomes, not server faults
            error.log(logging.ERROR if error.status_code >= 500 else logging.WARNING)
            return JSONResponse(status_code=error.status_code, content=error.to_dict())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Writes one line per request to the ``endpoint`` logger."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)

        summary = {
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }
        logging.getLogger("endpoint").log(
            _level_for_status(response.status_code),
            f"{request.method} {request.url.path}",
            extra={"response": summary},
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    """Register the error handler and, when enabled, request logging.

    Args:
        app: The FastAPI application
    """
    app.add_middleware(ErrorHandlingMiddleware)

    if settings.logging.enable_endpoint_logging:
        app.add_middleware(RequestLoggingMiddleware)

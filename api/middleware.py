"""
Global middleware and exception handlers.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth.errors import AuthError
from utils.schemas import AuthResult, FieldError

logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    """Attach any app-level middleware."""

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug("%s %s — %.3fs", request.method, request.url.path, elapsed)
        return response


def _failure(status_code: int, message: str, errors=None) -> JSONResponse:
    result = AuthResult.failure(status_code, message, errors)
    return JSONResponse(status_code=status_code, content=result.to_body())


def register_exception_handlers(app: FastAPI, *, debug: bool = False) -> None:
    """Render every error in the ``{success: false, message, errors?}`` shape."""

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return _failure(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            loc = [part for part in err.get("loc", ()) if part != "body"]
            field = str(loc[-1]) if loc else "body"
            errors.append(FieldError(field=field, message=err.get("msg", "Invalid value")))
        return _failure(400, "Validation failed", errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _failure(404, "Route not found")
        return _failure(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _failure(500, str(exc) if debug else "Internal server error")

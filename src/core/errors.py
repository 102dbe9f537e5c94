from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class AppError(Exception):
    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(code="not_found", message=message, status_code=404)


class EmptyResultError(NotFoundError):
    """A query that is valid but legitimately matches nothing."""

    def __init__(self, message: str = "No results") -> None:
        super().__init__(message=message)
        self.code = "empty_result"


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(code="bad_request", message=message, status_code=400)


class ValidationError(BadRequestError):
    def __init__(self, message: str = "Invalid parameter") -> None:
        super().__init__(message=message)
        self.code = "validation_error"


class UpstreamFetchError(AppError):
    def __init__(self, message: str = "Upstream service unavailable") -> None:
        super().__init__(code="upstream_error", message=message, status_code=502)


class ErrorEnvelope(BaseModel):
    error: ErrorDetail
    status: int


def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    envelope = ErrorEnvelope(
        error=ErrorDetail(code=exc.code, message=exc.message),
        status=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump())


def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    envelope = ErrorEnvelope(
        error=ErrorDetail(
            code="validation_error",
            message="Validation error",
            details={"errors": exc.errors()},
        ),
        status=400,
    )
    return JSONResponse(status_code=400, content=envelope.model_dump())


def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = "not_found" if exc.status_code == 404 else "http_error"
    envelope = ErrorEnvelope(
        error=ErrorDetail(code=code, message=str(exc.detail)),
        status=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=envelope.model_dump(), headers=exc.headers)


def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    envelope = ErrorEnvelope(
        error=ErrorDetail(code="internal_error", message="Internal server error"),
        status=500,
    )
    return JSONResponse(status_code=500, content=envelope.model_dump())

"""
Uniform JSON envelopes and the application's error boundary.

Every response body is one of three shapes::

    {"success": true, "message": "...", "data": ...}
    {"success": true, "data": [...], "pagination": {...}}
    {"success": false, "error": "..."}

Error envelopes never carry pagination.  ``register_exception_handlers``
installs the only place where exceptions turn into HTTP responses.
"""
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import ArticleNotFoundError, ArticleValidationError, BackendError
from app.schemas import ErrorEnvelope, ListEnvelope, PaginationInfo, SuccessEnvelope

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"


# ---------------------------------------------------------------------------
# Envelope builders
# ---------------------------------------------------------------------------

def success_envelope(data: Any = None, message: str | None = None) -> dict:
    envelope = SuccessEnvelope(message=message, data=data).model_dump()
    if message is None:
        del envelope["message"]
    return envelope


def list_envelope(items: list, pagination: PaginationInfo) -> dict:
    return ListEnvelope(data=items, pagination=pagination).model_dump(by_alias=True)


def error_envelope(error: str) -> dict:
    return ErrorEnvelope(error=error).model_dump()


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_envelope(error))


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors to ``"field: message"`` pairs, dropping the ``body`` prefix."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


async def _handle_not_found(request: Request, exc: ArticleNotFoundError) -> JSONResponse:
    return error_response(404, "Article not found")


async def _handle_article_validation(request: Request, exc: ArticleValidationError) -> JSONResponse:
    return error_response(400, str(exc))


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, _describe_validation_errors(exc))


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _handle_backend_error(request: Request, exc: BackendError) -> JSONResponse:
    logger.exception("Backend failure on %s %s", request.method, request.url.path)
    return error_response(500, GENERIC_SERVER_ERROR)


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(500, GENERIC_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ArticleNotFoundError, _handle_not_found)
    app.add_exception_handler(ArticleValidationError, _handle_article_validation)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(BackendError, _handle_backend_error)
    app.add_exception_handler(Exception, _handle_unexpected)

"""Exception handlers: every error leaves the API as {error, message, details}.

Domain exceptions map to status codes through their error_code; rate-limit
rejections also carry Retry-After. Cache failures never reach these
handlers because the cache layer degrades to safe defaults.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from assistant.core.config import get_settings
from assistant.domain.exceptions import AssistantException, RateLimitExceededException

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_STATE_TRANSITION": 400,
    "AUTHORIZATION_ERROR": 403,
    "RESOURCE_NOT_FOUND": 404,
    "RATE_LIMIT_EXCEEDED": 429,
}


def error_response(
    status_code: int,
    error: str,
    message: Any,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Validation errors without the non-serializable ctx/input payloads."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


async def handle_assistant_exception(request: Request, exc: AssistantException) -> JSONResponse:
    headers = None
    if isinstance(exc, RateLimitExceededException) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return error_response(
        STATUS_BY_ERROR_CODE.get(exc.error_code, 400),
        exc.error_code,
        exc.message,
        exc.details,
        headers,
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(422, "VALIDATION_ERROR", "Request validation failed", jsonable_errors(exc))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, "HTTP_ERROR", exc.detail, headers=exc.headers)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    """500 for anything unhandled; the exception text is exposed only in debug."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return error_response(500, "INTERNAL_ERROR", message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AssistantException, handle_assistant_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)

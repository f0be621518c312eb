"""Global exception handlers.

Each ``InoBotError`` subclass maps to one status code and one stable
``code`` string.  Upstream failures never leak provider details to the
caller; they are logged instead.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from inobot.core.errors import (
    ConfigurationError,
    InputValidationError,
    NotificationError,
    RequestTimeoutError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

CODE_VALIDATION_ERROR = "VALIDATION_ERROR"
CODE_UPSTREAM_ERROR = "UPSTREAM_ERROR"
CODE_CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
CODE_NOTIFICATION_FAILED = "NOTIFICATION_FAILED"
CODE_REQUEST_TIMEOUT = "REQUEST_TIMEOUT"

UPSTREAM_DETAIL = "Server error"
TIMEOUT_DETAIL = "Request timed out"


def _error(status_code: int, detail: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code},
    )


async def handle_input_validation(
    request: Request, exc: InputValidationError
) -> JSONResponse:
    return _error(400, str(exc), CODE_VALIDATION_ERROR)


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return _error(400, detail, CODE_VALIDATION_ERROR)


async def handle_upstream(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(
        "Upstream failure on %s: %s", request.url.path, exc, exc_info=exc
    )
    return _error(500, UPSTREAM_DETAIL, CODE_UPSTREAM_ERROR)


async def handle_configuration(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return _error(500, str(exc), CODE_CONFIGURATION_ERROR)


async def handle_notification(
    request: Request, exc: NotificationError
) -> JSONResponse:
    return _error(500, str(exc), CODE_NOTIFICATION_FAILED)


async def handle_timeout(request: Request, exc: RequestTimeoutError) -> JSONResponse:
    logger.warning("Request timed out on %s", request.url.path)
    return _error(504, TIMEOUT_DETAIL, CODE_REQUEST_TIMEOUT)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every handler to *app*."""
    app.add_exception_handler(InputValidationError, handle_input_validation)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(UpstreamError, handle_upstream)
    app.add_exception_handler(ConfigurationError, handle_configuration)
    app.add_exception_handler(NotificationError, handle_notification)
    app.add_exception_handler(RequestTimeoutError, handle_timeout)


"""Global error handling.

Every exception leaving a route is converted to the same JSON shape:
``error_code``, ``message``, ``user_message``, ``suggestion`` and
``retry_allowed``.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from ledgerwise.config import settings
from ledgerwise.core.errors import get_error
from ledgerwise.core.exceptions import LedgerError

logger = logging.getLogger(__name__)


def error_response(status_code: int, error_code: str, message: str | None = None) -> JSONResponse:
    error_info = get_error(error_code)
    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": error_code,
            "message": message or error_info["message"],
            "user_message": error_info["user_message"],
            "suggestion": error_info["suggestion"],
            "retry_allowed": error_info["retry_allowed"],
        },
    )


async def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
    """Handle service-layer exceptions using the error catalog."""
    # Details can include transaction descriptions; only logged in debug.
    extra = {"error_code": exc.error_code, "path": request.url.path, "method": request.method}
    if settings.debug:
        extra["details"] = exc.details

    log = logger.warning if exc.http_status < 500 else logger.error
    log(f"Ledger error: {exc.error_code}", extra=extra)

    return error_response(exc.http_status, exc.error_code)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle Pydantic validation errors."""
    error_messages = []
    for error in exc.errors():
        field = ".".join(str(x) for x in error.get("loc", []))
        error_messages.append(f"{field}: {error.get('msg', 'Invalid value')}")

    logger.warning(
        f"Validation error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method, "error_code": "VAL_001"},
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "VAL_001", " | ".join(error_messages))


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle database integrity errors."""
    # Do not log str(exc): it can include SQL + bound parameters.
    extra = {"path": request.url.path, "method": request.method}
    if settings.debug:
        logger.exception(f"Database integrity error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Database integrity error on {request.url.path}", extra=extra)

    error_msg = str(exc).lower()
    if "unique" in error_msg or "duplicate" in error_msg:
        return error_response(status.HTTP_409_CONFLICT, "DB_002")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "DB_001")


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing internals."""
    extra = {"error_type": type(exc).__name__, "path": request.url.path, "method": request.method}
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "SYS_001")

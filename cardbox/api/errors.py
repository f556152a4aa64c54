"""
Central error handling.

The only place where failures become HTTP statuses. Known failures carry
their own status; database constraint errors that escape a store become
409; anything else is an unknown failure: logged with its traceback and
answered with a fixed message.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from cardbox.models.failure import (
    UNKNOWN_FAILURE_MESSAGE,
    FailureDetail,
    FailureKind,
    KnownError,
    UnauthenticatedError,
)

logger = logging.getLogger(__name__)


def _failure_response(
    status_code: int,
    failure: FailureDetail,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=failure.model_dump(mode="json"),
        headers=headers,
    )


async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    if exc.status_code >= 500:
        logger.error("Known failure %s: %s", exc.kind.value, exc.message, exc_info=exc)
    return _failure_response(exc.status_code, exc.to_response(), headers)


async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    detail = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return _failure_response(
        status.HTTP_400_BAD_REQUEST,
        FailureDetail(
            kind=FailureKind.VALIDATION_FAILED,
            message="Invalid request",
            detail=detail,
        ),
    )


async def conflict_handler(_request: Request, exc: Exception) -> JSONResponse:
    return _failure_response(
        status.HTTP_409_CONFLICT,
        FailureDetail(
            kind=FailureKind.CONFLICT,
            message="Conflicts with the stored data",
            detail=type(exc).__name__,
        ),
    )


async def unknown_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _failure_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        FailureDetail(kind=FailureKind.UNKNOWN, message=UNKNOWN_FAILURE_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error handlers on the application."""
    app.add_exception_handler(KnownError, known_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError, request_validation_handler  # type: ignore[arg-type]
    )
    app.add_exception_handler(IntegrityError, conflict_handler)
    app.add_exception_handler(StaleDataError, conflict_handler)
    app.add_exception_handler(Exception, unknown_error_handler)

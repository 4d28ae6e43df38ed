"""Exception handlers for the FastAPI app.

Domain exceptions carry their own error_code and details; the handler only
picks the HTTP status. Subclasses inherit the status of the closest base
listed in _STATUS_BY_EXCEPTION.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from orgdesk.core.config import get_settings
from orgdesk.domain.exceptions import (
    InvalidStateTransitionException,
    OrgdeskException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)

logger = logging.getLogger(__name__)

_STATUS_BY_EXCEPTION: tuple[tuple[type[OrgdeskException], int], ...] = (
    (ResourceNotFoundException, status.HTTP_404_NOT_FOUND),
    (ResourceAlreadyExistsException, status.HTTP_409_CONFLICT),
    (InvalidStateTransitionException, status.HTTP_409_CONFLICT),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (SqlNotConfiguredException, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: OrgdeskException) -> int:
    """HTTP status for a domain exception (400 for anything unmapped)."""
    for exc_type, code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def _domain_error(request: Request, exc: OrgdeskException) -> JSONResponse:
    code = status_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %s %s", request.method, request.url.path, code, exc.error_code)
    return JSONResponse(status_code=code, content=exc.to_dict())


def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": {"errors": exc.errors()},
        },
    )


def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail, "details": {}},
        headers=getattr(exc, "headers", None),
    )


def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """500 with the exception text only in debug mode."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "INTERNAL_ERROR", "message": message, "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrgdeskException, _domain_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error)

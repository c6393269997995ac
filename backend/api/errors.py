"""
Exception handlers.

Maps each QHubError family to one HTTP status and the standard
``{"error", "message", "details"}`` body. Server-side detail is logged
here; what reaches the client is deliberately coarse for the
authentication and storage families.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    QHubError,
    QuotaExceededError,
    ValidationError,
)

logger = logging.getLogger(__name__)

UNAUTHORIZED_BODY = {"error": "UNAUTHORIZED", "message": "Not authenticated", "details": {}}
UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def unauthorized_response() -> JSONResponse:
    """The single opaque 401."""
    return JSONResponse(
        status_code=401,
        content=dict(UNAUTHORIZED_BODY),
        headers=UNAUTHORIZED_HEADERS,
    )


def _error_response(status_code: int, exc: QHubError, include_details: bool = True) -> JSONResponse:
    body = exc.to_dict()
    if not include_details:
        body["details"] = {}
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Install one handler per exception family."""

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        cause = getattr(exc, "cause", exc)
        logger.warning(
            "Authentication failed on %s %s: %s",
            request.method,
            request.url.path,
            cause.code,
        )
        return unauthorized_response()

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        # Rendered as a plain 404 so a foreign resource looks like a missing one
        logger.warning(
            "Authorization refused on %s %s: %s %s",
            request.method,
            request.url.path,
            exc.code,
            exc.details,
        )
        return _error_response(404, exc, include_details=False)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return _error_response(400, exc)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("Conflict on %s %s: %s", request.method, request.url.path, exc.code)
        return _error_response(409, exc)

    @app.exception_handler(QuotaExceededError)
    async def handle_quota_exceeded(request: Request, exc: QuotaExceededError):
        return _error_response(429, exc)

    @app.exception_handler(DependencyError)
    async def handle_dependency_error(request: Request, exc: DependencyError):
        logger.error(
            "Dependency failure on %s %s: %s %s",
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "Service temporarily unavailable",
                "details": {},
            },
        )

    @app.exception_handler(QHubError)
    async def handle_qhub_error(request: Request, exc: QHubError):
        logger.error("Unmapped error on %s %s: %s", request.method, request.url.path, exc.code)
        return _error_response(500, exc, include_details=False)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={
                "error": "VALIDATION_ERROR",
                "message": "Invalid request",
                "details": {"errors": errors},
            },
        )

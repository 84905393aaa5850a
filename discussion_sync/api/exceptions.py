"""Centralized exception handling for the API."""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from discussion_sync.logging_config import get_logger

logger = get_logger(__name__)


class DiscussionSyncError(Exception):
    """Base exception for Discussion Sync Server."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(message)


class NotFoundOrUnauthorized(DiscussionSyncError):
    """No record matched id, team and owner together.

    Missing rows, rows of another team and rows owned by someone else all
    raise this same error with the same message, so callers cannot learn
    whether records they do not own exist.
    """

    def __init__(self, resource_type: str):
        self.resource_type = resource_type
        super().__init__(
            message=f"{resource_type} not found or unauthorized",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
        )


class ForbiddenError(DiscussionSyncError):
    """Caller is not a member of the requested team."""

    def __init__(self, message: str = "Not a member of this team"):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="FORBIDDEN",
        )


class InvalidPayloadError(DiscussionSyncError):
    """A webhook body could not be read or parsed."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="INVALID_PAYLOAD",
        )


class WebhookAuthenticationError(DiscussionSyncError):
    """A webhook request failed signature verification."""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="INVALID_SIGNATURE",
        )


class WebhookNotConfiguredError(DiscussionSyncError):
    """The secret needed to verify a webhook is not configured."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="WEBHOOK_NOT_CONFIGURED")


class SourceConfigNotFound(DiscussionSyncError):
    """No source config matches an inbound delivery."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="SOURCE_CONFIG_NOT_FOUND",
        )


class UnsupportedSourceError(DiscussionSyncError):
    """No adapter is registered for a source type."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="UNSUPPORTED_SOURCE",
        )


def create_error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[dict] = None,
    request_id: Optional[str] = None,
) -> dict:
    """Create a standardized error response."""
    response = {
        "error": {
            "code": error_code,
            "message": message,
            "status": status_code,
        }
    }
    if details:
        response["error"]["details"] = details
    if request_id:
        response["error"]["request_id"] = request_id
    return response


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


async def discussion_sync_exception_handler(
    request: Request, exc: DiscussionSyncError
) -> JSONResponse:
    """Handle application exceptions."""
    logger.warning(
        "Request failed",
        error_code=exc.error_code,
        message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(
            status_code=exc.status_code,
            error_code=exc.error_code,
            message=exc.message,
            details=exc.details,
            request_id=_request_id(request),
        ),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    logger.warning("Validation error", errors=errors)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=create_error_response(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details={"errors": errors},
            request_id=_request_id(request),
        ),
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy database errors."""
    logger.error("Database error", error=str(exc), exc_info=exc)

    if isinstance(exc, IntegrityError):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=create_error_response(
                status_code=status.HTTP_409_CONFLICT,
                error_code="INTEGRITY_ERROR",
                message="Database integrity constraint violated",
                request_id=_request_id(request),
            ),
        )

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=create_error_response(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error_code="DATABASE_ERROR",
            message="Database operation failed. Please try again later.",
            request_id=_request_id(request),
        ),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error("Unexpected error", error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=create_error_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="INTERNAL_ERROR",
            message="An unexpected error occurred. Please try again later.",
            request_id=_request_id(request),
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(DiscussionSyncError, discussion_sync_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    # Generic handler should be last
    app.add_exception_handler(Exception, generic_exception_handler)

# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Every error response has the same shape:
#   {"detail": "<message>", "code": "<MACHINE_CODE>", "suggestion": ..., "details": ...}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError, UniqueViolationError

logger = logging.getLogger(__name__)


class EstateAdminException(Exception):
    """
    Base exception for the admin API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ESTATE_ADMIN_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found
# =============================================================================

class ProjectNotFoundError(EstateAdminException):
    """Raised when a project id or slug doesn't exist."""

    def __init__(self, project_ref: str):
        super().__init__(
            message=f"Project not found: {project_ref}",
            code="PROJECT_NOT_FOUND",
            status_code=404,
            suggestion="Check that the project id (or slug) is correct",
            details={"project": project_ref}
        )


class DeveloperNotFoundError(EstateAdminException):
    """Raised when a developer id or slug doesn't exist."""

    def __init__(self, developer_ref: str):
        super().__init__(
            message=f"Developer not found: {developer_ref}",
            code="DEVELOPER_NOT_FOUND",
            status_code=404,
            suggestion="Check that the developer id (or slug) is correct",
            details={"developer": developer_ref}
        )


# =============================================================================
# Validation / Conflicts
# =============================================================================

class InvalidPayloadError(EstateAdminException):
    """Raised when a structured field has the wrong shape."""

    def __init__(self, field: str, error: str):
        super().__init__(
            message=f"Invalid value for '{field}': {error}",
            code="INVALID_PAYLOAD",
            status_code=422,
            suggestion="Send the field in the documented JSON shape",
            details={"field": field, "error": error}
        )


class SlugConflictError(EstateAdminException):
    """Raised when the slug unique index keeps rejecting resolved slugs."""

    def __init__(self, slug: str, attempts: int):
        super().__init__(
            message=f"Could not reserve a unique slug for '{slug}'",
            code="SLUG_CONFLICT",
            status_code=409,
            suggestion="Retry the request or send a more specific slug",
            details={"slug": slug, "attempts": attempts}
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class NoFileUploadedError(EstateAdminException):
    """Raised when an upload endpoint receives no files."""

    def __init__(self, field: str):
        super().__init__(
            message="No file uploaded",
            code="NO_FILE_UPLOADED",
            status_code=400,
            suggestion=f"Attach at least one file in the '{field}' form field",
            details={"field": field}
        )


class FileTooLargeError(EstateAdminException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, filename: str, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {filename} ({size_mb:.1f}MB, max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"filename": filename, "size_mb": size_mb, "max_mb": max_mb}
        )


class TooManyFilesError(EstateAdminException):
    """Raised when a multipart field carries more files than allowed."""

    def __init__(self, field: str, count: int, max_count: int):
        super().__init__(
            message=f"Too many files in '{field}': {count} (max: {max_count})",
            code="TOO_MANY_FILES",
            status_code=400,
            suggestion=f"Send at most {max_count} files per request",
            details={"field": field, "count": count, "max_count": max_count}
        )


class StorageUploadError(EstateAdminException):
    """Raised when file upload to storage fails."""

    def __init__(self, filename: str, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"filename": filename, "error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def estate_admin_exception_handler(
    request: Request,
    exc: EstateAdminException
) -> JSONResponse:
    """
    Convert EstateAdminException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def store_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """
    Convert database failures to a 503 response.

    Unique-index violations become 409. Store internals are logged, not
    returned.
    """
    if isinstance(exc, UniqueViolationError):
        logger.warning(f"Unique violation on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=409,
            content={
                "detail": "A record with the same unique value already exists",
                "code": "CONFLICT",
                "suggestion": "Change the conflicting value and retry",
            }
        )

    logger.error(f"Store failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={
            "detail": "The database is unavailable or rejected the operation",
            "code": "STORE_ERROR",
            "suggestion": "Try again later or contact support if the issue persists",
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle request validation errors.

    Converts validation errors to user-friendly messages.
    """
    errors = exc.errors() if hasattr(exc, "errors") else str(exc)
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": errors if isinstance(errors, str) else _jsonable_errors(errors),
        }
    )


def _jsonable_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep only the JSON-safe parts of pydantic error dicts."""
    return [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in errors
    ]

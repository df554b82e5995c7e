"""
errors - Application error taxonomy.

Every error raised on purpose toward the HTTP boundary derives from
AppError and carries its own status code, a machine-readable code and
a list of detail entries ({code, message, field?, details?}).
"""

from __future__ import annotations

from typing import Optional


# ── Error codes ────────────────────────────────────────────────────────
VALIDATION_ERROR       = "VALIDATION_ERROR"
INVALID_INPUT          = "INVALID_INPUT"
MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
INVALID_FILE_TYPE      = "INVALID_FILE_TYPE"
FILE_TOO_LARGE         = "FILE_TOO_LARGE"
NOT_FOUND              = "NOT_FOUND"
DATABASE_ERROR         = "DATABASE_ERROR"
INTERNAL_ERROR         = "INTERNAL_ERROR"


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        errors: Optional[list[dict]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        self.errors = errors or [{"code": self.code, "message": message}]


class ValidationError(AppError):
    status_code = 400
    code = VALIDATION_ERROR

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls("Validation failed", errors=[
            {"code": VALIDATION_ERROR, "message": message, "field": field},
        ])


class NotFoundError(AppError):
    status_code = 404
    code = NOT_FOUND

    def __init__(self, resource: str = "Resource", identifier: Optional[str] = None):
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message)


class FileUploadError(AppError):
    status_code = 400
    code = INVALID_FILE_TYPE

    @classmethod
    def too_large(cls, max_size: str) -> "FileUploadError":
        return cls(f"File size exceeds the {max_size} limit", code=FILE_TOO_LARGE)

    @classmethod
    def missing(cls) -> "FileUploadError":
        return cls("No file uploaded", code=MISSING_REQUIRED_FIELD)


class DatabaseError(AppError):
    status_code = 500
    code = DATABASE_ERROR

    def __init__(self, message: str = "Database operation failed", details=None):
        super().__init__(message, errors=[
            {"code": DATABASE_ERROR, "message": message, "details": details},
        ])

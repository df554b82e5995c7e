"""
services.validation_service - Field-level validation primitives.

Each validator takes a raw value plus a field label and returns a
ValidationResult.  Malformed input is reported through the result,
never raised, so callers can collect errors row by row.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import config

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None) -> "ValidationResult":
        return cls(True, None, value)

    @classmethod
    def fail(cls, error: str, value: Any = None) -> "ValidationResult":
        return cls(False, error, value)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ── Strings ────────────────────────────────────────────────────────────

def validate_required_string(value: Any, field: str) -> ValidationResult:
    if not isinstance(value, str) or not value.strip():
        return ValidationResult.fail(f"{field} is required.")
    return ValidationResult.ok(value.strip())


def validate_optional_string(value: Any, field: str) -> ValidationResult:
    """Absent or blank is fine (value None); anything else must be text."""
    if _blank(value):
        return ValidationResult.ok(None)
    if not isinstance(value, str):
        return ValidationResult.fail(f"{field} must be text.")
    return ValidationResult.ok(value.strip())


# ── Numbers ────────────────────────────────────────────────────────────

def validate_positive_integer(value: Any, field: str) -> ValidationResult:
    if _blank(value):
        return ValidationResult.fail(f"{field} is required.", 0)

    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif "_" in str(value):
        parsed = None
    else:
        try:
            parsed = int(str(value).strip())
        except ValueError:
            parsed = None

    if parsed is None or parsed < 1:
        return ValidationResult.fail(f"{field} must be a positive integer.", 0)
    return ValidationResult.ok(parsed)


def validate_non_negative_number(value: Any, field: str) -> ValidationResult:
    if _blank(value):
        return ValidationResult.fail(f"{field} is required.", Decimal(0))

    # int() and Decimal() accept digit-group underscores, CSV input must not
    text = str(value).strip()
    try:
        parsed = None if "_" in text else Decimal(text)
    except InvalidOperation:
        parsed = None

    if parsed is None or not parsed.is_finite() or parsed < 0:
        return ValidationResult.fail(f"{field} must be a non-negative number.", Decimal(0))
    return ValidationResult.ok(parsed)


# ── Identifiers ────────────────────────────────────────────────────────

def validate_uuid(value: Any, field: str = "ID") -> ValidationResult:
    if not isinstance(value, str) or not value:
        return ValidationResult.fail(f"{field} is required.")
    if not UUID_RE.match(value):
        return ValidationResult.fail(f"Invalid {field} format. Must be a valid UUID.")
    return ValidationResult.ok(value.lower())


# ── Uploads ────────────────────────────────────────────────────────────

def validate_file(
    filename: Optional[str],
    mimetype: Optional[str],
    size: int,
    *,
    allowed_mime_types: tuple[str, ...] = config.ALLOWED_UPLOAD_MIME_TYPES,
    allowed_extensions: tuple[str, ...] = config.ALLOWED_UPLOAD_EXTENSIONS,
    max_size: int = config.MAX_UPLOAD_BYTES,
) -> ValidationResult:
    """Check an uploaded file's presence, size, MIME type and extension."""
    if not filename:
        return ValidationResult.fail("No file uploaded. Please upload a CSV file.")
    if size <= 0:
        return ValidationResult.fail("Uploaded file is empty.")
    if size > max_size:
        limit_mb = max_size / (1024 * 1024)
        return ValidationResult.fail(
            f"File size exceeds the maximum allowed size of {limit_mb:g}MB."
        )
    if (mimetype or "").lower() not in allowed_mime_types:
        return ValidationResult.fail("Invalid file type. Please upload a CSV file.")
    if not filename.lower().endswith(allowed_extensions):
        return ValidationResult.fail(
            f"Invalid file extension. Allowed extensions: {', '.join(allowed_extensions)}"
        )
    return ValidationResult.ok()

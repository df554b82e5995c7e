"""
api.responses - Standard JSON envelope shared by every endpoint.

    {success, message, data?, errors?, meta?, timestamp}
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def envelope(
    success: bool,
    message: str,
    *,
    data: Any = None,
    errors: Optional[list[dict]] = None,
    meta: Optional[dict] = None,
) -> dict:
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if errors is not None:
        body["errors"] = errors
    if meta is not None:
        body["meta"] = meta
    body["timestamp"] = datetime.now(timezone.utc).isoformat()
    return body

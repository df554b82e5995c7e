"""
api.request_log - One log line per API request with its timing.
"""

import logging
import time

from flask import g, request

from api import api_bp

logger = logging.getLogger("api.requests")


@api_bp.before_request
def _start_timer():
    g.request_started = time.perf_counter()


@api_bp.after_request
def _log_request(response):
    started = g.pop("request_started", None)
    elapsed_ms = (time.perf_counter() - started) * 1000 if started else 0.0
    logger.info(
        f"{request.method} {request.full_path.rstrip('?')} "
        f"→ {response.status_code} ({elapsed_ms:.1f} ms) "
        f"ip={request.remote_addr or 'unknown'}"
    )
    return response

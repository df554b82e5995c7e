"""
api.errors - JSON error handlers for the API blueprint.

Every failure leaves the API as the standard envelope with
success=false and a list of {code, message, field?, details?}.
"""

import logging
import traceback

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

import config
import errors
from api import api_bp
from api.responses import envelope

logger = logging.getLogger(__name__)


def _error_response(status: int, message: str, error_list: list[dict]):
    return jsonify(envelope(False, message, errors=error_list)), status


@api_bp.errorhandler(errors.AppError)
def api_app_error(e: errors.AppError):
    if e.status_code >= 500:
        logger.error(f"{e.__class__.__name__}: {e.message}")
    return _error_response(e.status_code, e.message, e.errors)


@api_bp.errorhandler(RequestEntityTooLarge)
def api_too_large(_e):
    limit_mb = config.MAX_UPLOAD_BYTES / (1024 * 1024)
    err = errors.FileUploadError.too_large(f"{limit_mb:g}MB")
    return _error_response(400, err.message, err.errors)


@api_bp.errorhandler(SQLAlchemyError)
def api_database_error(e: SQLAlchemyError):
    logger.exception(f"Database error: {e}")
    err = errors.DatabaseError("Database operation failed", details="A database error occurred")
    return _error_response(err.status_code, err.message, err.errors)


@api_bp.errorhandler(HTTPException)
def api_http_error(e: HTTPException):
    code = errors.NOT_FOUND if e.code in (404, 405) else errors.INVALID_INPUT
    return _error_response(e.code or 500, e.description or e.name,
                           [{"code": code, "message": e.name}])


@api_bp.errorhandler(Exception)
def api_server_error(e: Exception):
    logger.exception(f"Unhandled error: {e}")
    if config.DEVELOPMENT:
        detail = {"code": errors.INTERNAL_ERROR, "message": str(e),
                  "details": traceback.format_exc()}
        return _error_response(500, str(e), [detail])
    return _error_response(500, "Internal server error", [
        {"code": errors.INTERNAL_ERROR, "message": "An unexpected error occurred"},
    ])

"""
api.routes_inventory - /api/inventory/upload endpoint.

Accepts one CSV via multipart upload (field name 'file') and runs it
through the import engine.
"""

import os

from flask import current_app, request, jsonify

from api import api_bp
from api.responses import envelope
from errors import FileUploadError, ValidationError
from import_engine import ProcessingResult, ScratchSpace, run_import
from services.validation_service import validate_file


def upload_status(result: ProcessingResult) -> tuple[int, str]:
    """HTTP status and message for an import result."""
    if result.errors and result.processed_rows == 0:
        return 400, "Failed to process any rows from the CSV file."
    if result.errors:
        return 207, "CSV processed with some errors."
    return 200, "CSV file processed successfully."


@api_bp.route("/inventory/upload", methods=["POST"])
def upload_inventory():
    """
    POST /api/inventory/upload

    Multipart: field name 'file'.  Responds 200 when every row was
    imported, 207 when some rows failed, 400 when none were imported.
    """
    f = request.files.get("file")
    if f is None:
        raise FileUploadError.missing()

    # Measure without reading the upload into memory
    stream = f.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)

    check = validate_file(f.filename, f.mimetype, size)
    if not check.valid:
        raise ValidationError.for_field("file", check.error or "Invalid file")

    scratch = ScratchSpace(current_app.config.get("SCRATCH_DIR"))
    result = run_import(stream, scratch=scratch)
    status, message = upload_status(result)

    meta = {
        "totalRows": result.total_rows,
        "processedRows": result.processed_rows,
        "created": dict(result.created),
        "updated": dict(result.updated),
    }
    body = envelope(status != 400, message, data=result.to_dict(), meta=meta)
    return jsonify(body), status

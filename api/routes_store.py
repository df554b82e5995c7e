"""
api.routes_store - /api/store endpoints (listing and PDF reports).
"""

from flask import Response, jsonify

from api import api_bp
from api.responses import envelope
from db import get_session
from errors import NotFoundError, ValidationError
from services.report_service import get_store_report_data, render_report_pdf, report_filename
from services.store_service import list_stores
from services.validation_service import validate_uuid


@api_bp.route("/store")
def get_all_stores():
    """GET /api/store"""
    session = get_session()
    try:
        stores = [s.to_dict() for s in list_stores(session)]
    finally:
        session.close()
    body = envelope(True, "Stores retrieved successfully",
                    data=stores, meta={"total": len(stores)})
    return jsonify(body)


@api_bp.route("/store/<store_id>/download-report")
def download_store_report(store_id: str):
    """GET /api/store/{id}/download-report → application/pdf attachment"""
    check = validate_uuid(store_id, "Store ID")
    if not check.valid:
        raise ValidationError.for_field("id", check.error or "Invalid store ID")

    session = get_session()
    try:
        report = get_store_report_data(session, check.value)
    finally:
        session.close()

    if report is None:
        raise NotFoundError("Store", store_id)

    pdf = render_report_pdf(report)
    filename = report_filename(report["store"]["name"])
    return Response(
        pdf,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

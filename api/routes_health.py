"""
api.routes_health - /api/health liveness probe.
"""

from flask import jsonify

from api import api_bp
from db import ping


@api_bp.route("/health")
def health():
    """GET /api/health - trivial database round trip."""
    ping()
    return jsonify({"status": "ok"})

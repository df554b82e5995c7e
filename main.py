#!/usr/bin/env python3
"""
Bookstore inventory - REST API for CSV stock ingestion and store reports
=========================================================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify

import config
from api import api_bp
from api.responses import envelope
from db import init_db, get_session, Store

logger = logging.getLogger("bookstore")


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(level=level, format=config.LOG_FORMAT)


def create_app(db_url: Optional[str] = None, scratch_dir: Optional[str] = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = config.MAX_UPLOAD_BYTES + 64 * 1024   # multipart overhead
    app.config["SCRATCH_DIR"] = str(scratch_dir or config.SCRATCH_DIR)

    # ── Initialise database ─────────────────────────────────────────
    db_url = db_url or config.DB_URL
    init_db(db_url)
    logger.info(f"Database: {db_url}")

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    @app.route("/")
    def root():
        return jsonify({"message": "Bookstore inventory API"})

    # ── Error handlers (outside the /api blueprint) ─────────────────
    @app.errorhandler(404)
    def _404(_e):
        return jsonify(envelope(False, "Route not found", errors=[
            {"code": "NOT_FOUND", "message": "The requested endpoint does not exist"},
        ])), 404

    @app.errorhandler(405)
    def _405(_e):
        return jsonify(envelope(False, "Method not allowed", errors=[
            {"code": "NOT_FOUND", "message": "The requested method is not supported"},
        ])), 405

    @app.errorhandler(500)
    def _500(_e):
        return jsonify(envelope(False, "Internal server error", errors=[
            {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
        ])), 500

    return app


def _seed_if_empty():
    """Auto-import seed CSV when the database is empty."""
    session = get_session()
    count = session.query(Store).count()
    session.close()

    if count > 0:
        logger.info(f"Database has {count} stores.")
        return

    if not config.CSV_SEED_PATH.exists():
        logger.info(f"No seed CSV at {config.CSV_SEED_PATH} - starting empty.")
        return

    logger.info(f"Database empty → auto-importing {config.CSV_SEED_PATH.name} …")
    from import_engine import run_import_from_file

    result = run_import_from_file(config.CSV_SEED_PATH)

    logger.info(f"Done: {result.processed_rows} imported, "
                f"{len(result.errors)} failed / {result.total_rows} rows")
    for err in result.errors[:10]:
        logger.warning(f"Row {err['row']}: {err['message']}")


def main():
    configure_logging()
    app = create_app()
    _seed_if_empty()

    logger.info(f"Listening on http://{config.HOST}:{config.PORT}")
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()

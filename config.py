"""
Bookstore inventory - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
import tempfile
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR      = Path(__file__).resolve().parent
SCRATCH_DIR   = Path(os.environ.get("BOOKSTORE_SCRATCH_DIR", tempfile.gettempdir()))
CSV_SEED_PATH = Path(os.environ.get("BOOKSTORE_CSV_SEED", BASE_DIR / "inventory_seed.csv"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("BOOKSTORE_DB", f"sqlite:///{BASE_DIR / 'bookstore.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("BOOKSTORE_HOST", "0.0.0.0")
PORT   = int(os.environ.get("BOOKSTORE_PORT", "3000"))
DEBUG  = os.environ.get("BOOKSTORE_DEBUG", "0") == "1"
SECRET = os.environ.get("BOOKSTORE_SECRET", "bookstore-dev-key-change-in-prod")

# Error responses carry exception detail only in development
ENVIRONMENT = os.environ.get("BOOKSTORE_ENV", "production")
DEVELOPMENT = ENVIRONMENT == "development"

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL  = os.environ.get("BOOKSTORE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# ── Uploads ────────────────────────────────────────────────────────────
MAX_UPLOAD_BYTES          = 10 * 1024 * 1024
ALLOWED_UPLOAD_MIME_TYPES = ("text/csv", "application/vnd.ms-excel", "text/plain")
ALLOWED_UPLOAD_EXTENSIONS = (".csv",)

# ── Reports ────────────────────────────────────────────────────────────
REPORT_TOP_N       = 5
LOGO_FETCH_TIMEOUT = float(os.environ.get("BOOKSTORE_LOGO_TIMEOUT", "10"))

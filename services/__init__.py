"""
services - Business-logic layer sitting between API and DB.
"""

from services.validation_service import ValidationResult             # noqa: F401
from services.store_service import (                                 # noqa: F401
    list_stores,
    top_priciest_books,
    top_prolific_authors,
)
from services.report_service import (                                # noqa: F401
    get_store_report_data,
    render_report_pdf,
    report_filename,
)

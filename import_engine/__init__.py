"""
import_engine - CSV batch-ingestion pipeline.

Public API:
    run_import(file_content) → ProcessingResult
    run_import_from_file(path) → ProcessingResult
"""

from import_engine.importer import run_import, run_import_from_file    # noqa: F401
from import_engine.report import ProcessingResult                      # noqa: F401
from import_engine.scratch import ScratchSpace                         # noqa: F401

"""
import_engine.importer - Top-level orchestrator.

Coordinates scratch storage → csv_parser → row_processor → per-row
commit and produces a structured ProcessingResult.

The upload is copied to a scratch file, counted in one streaming pass,
then read back in fixed-size batches.  Every row runs in its own
transaction: a bad row is rolled back and reported, the rest of the
file carries on.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.engine import get_session
from import_engine.csv_parser import count_rows, missing_columns, read_batch
from import_engine.report import ProcessingResult
from import_engine.row_processor import RowProcessor, validate_row
from import_engine.scratch import ScratchSpace

logger = logging.getLogger(__name__)

BATCH_SIZE = 100
FIRST_DATA_ROW = 2      # row 1 is the header

SessionFactory = Callable[[], Session]


def run_import(
    file_content: bytes | BinaryIO,
    *,
    scratch: Optional[ScratchSpace] = None,
    session_factory: Optional[SessionFactory] = None,
) -> ProcessingResult:
    """
    Import an uploaded CSV (bytes or binary file object).

    The scratch copy is always removed, whether the run finishes,
    returns early on an empty file, or raises.
    """
    scratch = scratch or ScratchSpace()
    with scratch.holding(file_content) as path:
        return _process_file(path, session_factory or get_session)


def run_import_from_file(
    path: str | Path,
    *,
    session_factory: Optional[SessionFactory] = None,
) -> ProcessingResult:
    """Import a CSV that already lives on disk.  The file is left in place."""
    return _process_file(Path(path), session_factory or get_session)


def total_batches(total_rows: int, batch_size: int) -> int:
    return math.ceil(total_rows / batch_size) if total_rows else 0


def _process_file(path: Path, session_factory: SessionFactory) -> ProcessingResult:
    result = ProcessingResult()
    batch_size = BATCH_SIZE

    result.total_rows = count_rows(path)
    logger.info(f"Total rows to process: {result.total_rows}")
    if result.total_rows == 0:
        return result

    missing = missing_columns(path)
    if missing:
        logger.warning(f"CSV header lacks expected columns: {', '.join(missing)}")

    batches = total_batches(result.total_rows, batch_size)
    logger.info(f"Processing {batches} batch(es) of up to {batch_size} rows")

    processor = RowProcessor()
    for batch_idx in range(batches):
        start = batch_idx * batch_size
        first_row_no = start + FIRST_DATA_ROW
        last_row_no = min(first_row_no + batch_size - 1, result.total_rows + 1)
        logger.info(
            f"Batch {batch_idx + 1}/{batches} (rows {first_row_no}-{last_row_no})"
        )

        rows = read_batch(path, start, batch_size)
        for offset, raw in enumerate(rows):
            _process_row(raw, first_row_no + offset, processor, session_factory, result)

        logger.info(
            f"Batch {batch_idx + 1}/{batches} done: "
            f"{result.processed_rows}/{result.total_rows} rows processed"
        )

    return result


def _process_row(
    raw: dict,
    row_no: int,
    processor: RowProcessor,
    session_factory: SessionFactory,
    result: ProcessingResult,
) -> None:
    """Validate and apply one row inside its own transaction."""
    session = session_factory()
    try:
        check = validate_row(raw)
        if not check.valid:
            session.rollback()
            result.add_error(row_no, check.error or "Validation failed")
            return

        outcome = processor.process(session, check.value)
        session.commit()
        result.record(outcome)
    except Exception as exc:
        session.rollback()
        logger.debug(f"Row {row_no} failed", exc_info=True)
        result.add_error(row_no, _error_message(exc))
    finally:
        session.close()


def _error_message(exc: Exception) -> str:
    # DBAPI text is more useful than SQLAlchemy's wrapped statement dump
    if isinstance(exc, SQLAlchemyError) and getattr(exc, "orig", None) is not None:
        return str(exc.orig)
    return str(exc) or exc.__class__.__name__

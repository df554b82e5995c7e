"""
import_engine.csv_parser - Streaming CSV reading from a file on disk.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Header normalisation (trim, lower-case, whitespace → underscore)
  • Row iteration without loading the file into memory
  • Batch windows that stop reading as soon as they are full
"""

from __future__ import annotations

import csv
import re
from contextlib import closing
from itertools import islice
from pathlib import Path
from typing import Iterator, Optional

import config
from import_engine.field_map import REQUIRED_COLUMNS

_WS = re.compile(r"\s+")

# A single cell may be as large as the whole upload
csv.field_size_limit(max(csv.field_size_limit(), config.MAX_UPLOAD_BYTES))


def normalize_header(header: Optional[str]) -> str:
    return _WS.sub("_", (header or "").strip().lower())


def read_header(path: str | Path) -> Optional[list[str]]:
    """Return the normalised header row, or None for an empty file."""
    with _open(path) as fh:
        first = next(csv.reader(fh), None)
    if first is None:
        return None
    return [normalize_header(h) for h in first]


def missing_columns(path: str | Path) -> list[str]:
    header = read_header(path) or []
    return [c for c in REQUIRED_COLUMNS if c not in header]


def iter_rows(path: str | Path) -> Iterator[dict]:
    """
    Yield each data row as a dict keyed by normalised header.

    Blank lines are skipped.  The file handle is closed when the
    generator is exhausted or closed early.
    """
    with _open(path) as fh:
        reader = csv.DictReader(fh)
        if reader.fieldnames is None:
            return
        reader.fieldnames = [normalize_header(h) for h in reader.fieldnames]
        yield from reader


def count_rows(path: str | Path) -> int:
    with closing(iter_rows(path)) as rows:
        return sum(1 for _ in rows)


def read_batch(path: str | Path, start: int, size: int) -> list[dict]:
    """
    Return up to ``size`` rows beginning at zero-based data row ``start``.

    Rows after the window are never read.
    """
    with closing(iter_rows(path)) as rows:
        return list(islice(rows, start, start + size))


def _open(path: str | Path):
    return open(path, "r", encoding="utf-8-sig", errors="replace", newline="")

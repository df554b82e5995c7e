"""
import_engine.report - Structured result of a CSV import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from import_engine.row_processor import RowOutcome


def _created() -> dict:
    return {"stores": 0, "authors": 0, "books": 0, "storeBooks": 0}


@dataclass
class ProcessingResult:
    total_rows: int = 0
    processed_rows: int = 0
    errors: list[dict] = field(default_factory=list)   # [{row, message}]
    created: dict = field(default_factory=_created)
    updated: dict = field(default_factory=lambda: {"storeBooks": 0})

    @property
    def success(self) -> bool:
        return not self.errors

    def add_error(self, row: int, message: str):
        self.errors.append({"row": row, "message": message})

    def record(self, outcome: RowOutcome):
        self.processed_rows += 1
        self.created["stores"]     += outcome.created_store
        self.created["authors"]    += outcome.created_author
        self.created["books"]      += outcome.created_book
        self.created["storeBooks"] += outcome.created_store_book
        self.updated["storeBooks"] += outcome.updated_store_book

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "totalRows": self.total_rows,
            "processedRows": self.processed_rows,
            "errors": list(self.errors),
            "created": dict(self.created),
            "updated": dict(self.updated),
        }

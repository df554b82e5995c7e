"""
import_engine.row_processor - Validate one CSV row and resolve it into entities.

Single-responsibility: given a validated InventoryRow and an open session,
find-or-create the Store, Author, Book and stock record it describes.
The processor keeps no state between rows and never commits; the
caller owns the transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from db.gateway import authors, books, store_books, stores
from import_engine import field_map as col
from services.validation_service import (
    ValidationResult,
    validate_non_negative_number,
    validate_optional_string,
    validate_positive_integer,
    validate_required_string,
)


@dataclass(frozen=True)
class InventoryRow:
    store_name: str
    store_address: str
    book_name: str
    pages: int
    author_name: str
    price: Decimal
    logo: Optional[str] = None


@dataclass
class RowOutcome:
    created_store: bool = False
    created_author: bool = False
    created_book: bool = False
    created_store_book: bool = False
    updated_store_book: bool = False


_VALIDATORS = (
    (col.STORE_NAME,    validate_required_string),
    (col.STORE_ADDRESS, validate_required_string),
    (col.BOOK_NAME,     validate_required_string),
    (col.PAGES,         validate_positive_integer),
    (col.AUTHOR_NAME,   validate_required_string),
    (col.PRICE,         validate_non_negative_number),
    (col.LOGO,          validate_optional_string),
)


def validate_row(raw: dict) -> ValidationResult:
    """Check all columns in order; return the first failure or an InventoryRow."""
    values = {}
    for column, validator in _VALIDATORS:
        result = validator(raw.get(column), column)
        if not result.valid:
            return result
        values[column] = result.value
    return ValidationResult.ok(InventoryRow(**values))


class RowProcessor:

    def process(self, session: Session, row: InventoryRow) -> RowOutcome:
        outcome = RowOutcome()

        store, outcome.created_store = stores.find_or_create(
            {"name": row.store_name},
            {"address": row.store_address, "logo": row.logo},
            session=session,
        )
        if not outcome.created_store and row.logo:
            stores.update(store.id, {"logo": row.logo}, session=session)

        author, outcome.created_author = authors.find_or_create(
            {"name": row.author_name}, session=session,
        )

        book, outcome.created_book = books.find_or_create(
            {"name": row.book_name, "author_id": author.id},
            {"pages": row.pages},
            session=session,
        )

        stock, outcome.created_store_book = store_books.find_or_create(
            {"store_id": store.id, "book_id": book.id},
            {"price": row.price, "copies": 1, "sold_out": False},
            session=session,
        )
        if not outcome.created_store_book:
            store_books.update(stock.id, {
                "copies": stock.copies + 1,
                "price": row.price,      # last write wins
                "sold_out": False,
            }, session=session)
            outcome.updated_store_book = True

        return outcome

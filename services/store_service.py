"""
services.store_service - Read-only store and stock queries.

All session management is the caller's responsibility (open before,
close after).  Nothing here writes.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from db.gateway import stores
from db.models import Book, Store, StoreBook


def list_stores(session: Session) -> list[Store]:
    return stores.find_all(session=session, order_by=Store.name)


def top_priciest_books(session: Session, store_id: str, limit: int = 5) -> list[StoreBook]:
    """Stock rows of a store, most expensive first.  Price ties keep storage order."""
    stmt = (
        select(StoreBook)
        .where(StoreBook.store_id == store_id)
        .options(joinedload(StoreBook.book).joinedload(Book.author))
        .order_by(StoreBook.price.desc())
        .limit(limit)
    )
    return list(session.scalars(stmt).unique().all())


def top_prolific_authors(session: Session, store_id: str, limit: int = 5) -> list[dict]:
    """
    Authors ranked by how many distinct in-stock books (copies > 0) the
    store carries for them.  Ties keep first-seen order.
    """
    stmt = (
        select(StoreBook)
        .where(StoreBook.store_id == store_id, StoreBook.copies > 0)
        .options(joinedload(StoreBook.book).joinedload(Book.author))
    )

    by_author: dict[str, dict] = {}
    for stock in session.scalars(stmt).unique():
        author = stock.book.author if stock.book else None
        if author is None:
            continue
        entry = by_author.setdefault(
            author.id, {"id": author.id, "name": author.name, "book_ids": set()}
        )
        entry["book_ids"].add(stock.book_id)

    ranked = sorted(by_author.values(), key=lambda e: len(e["book_ids"]), reverse=True)
    return [
        {"id": e["id"], "name": e["name"], "bookCount": len(e["book_ids"])}
        for e in ranked[:limit]
    ]

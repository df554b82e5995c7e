"""
db.models - SQLAlchemy ORM declarations.

Tables
------
authors      - one row per distinct (trimmed) author name.
books        - one row per (name, author); pages fixed at creation.
stores       - one row per distinct (trimmed) store name.
store_books  - stock record linking a store to a book (price, copies,
               sold-out flag).  At most one row per store/book pair.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Boolean, Numeric, DateTime, Text, ForeignKey,
    Index, UniqueConstraint, CheckConstraint, event,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at = Column(DateTime, default=_now)
    updated_at = Column(DateTime, default=_now, onupdate=_now)


class Author(TimestampMixin, Base):
    __tablename__ = "authors"

    id   = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(255), nullable=False, index=True)

    books = relationship("Book", back_populates="author",
                         cascade="all, delete-orphan", passive_deletes=True)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


class Book(TimestampMixin, Base):
    __tablename__ = "books"

    id        = Column(String(36), primary_key=True, default=_uuid)
    name      = Column(String(255), nullable=False)
    pages     = Column(Integer, nullable=False)
    author_id = Column(String(36),
                       ForeignKey("authors.id", onupdate="CASCADE", ondelete="CASCADE"),
                       nullable=False, index=True)

    author = relationship("Author", back_populates="books")
    stock  = relationship("StoreBook", back_populates="book",
                          cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("pages >= 1", name="ck_books_pages_positive"),
        Index("ix_books_name_author", "name", "author_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "pages": self.pages,
            "authorId": self.author_id,
        }


class Store(TimestampMixin, Base):
    __tablename__ = "stores"

    id      = Column(String(36), primary_key=True, default=_uuid)
    name    = Column(String(255), nullable=False, index=True)
    address = Column(Text, nullable=False)
    logo    = Column(Text, nullable=True)

    stock = relationship("StoreBook", back_populates="store",
                         cascade="all, delete-orphan", passive_deletes=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "logo": self.logo,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class StoreBook(TimestampMixin, Base):
    __tablename__ = "store_books"

    id       = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36),
                      ForeignKey("stores.id", onupdate="CASCADE", ondelete="CASCADE"),
                      nullable=False, index=True)
    book_id  = Column(String(36),
                      ForeignKey("books.id", onupdate="CASCADE", ondelete="CASCADE"),
                      nullable=False, index=True)
    price    = Column(Numeric(10, 2), nullable=False)
    copies   = Column(Integer, nullable=False, default=0)
    sold_out = Column(Boolean, nullable=False, default=False)

    store = relationship("Store", back_populates="stock")
    book  = relationship("Book", back_populates="stock")

    __table_args__ = (
        UniqueConstraint("store_id", "book_id", name="uq_store_books_store_book"),
        CheckConstraint("price >= 0", name="ck_store_books_price_non_negative"),
        CheckConstraint("copies >= 0", name="ck_store_books_copies_non_negative"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "storeId": self.store_id,
            "bookId": self.book_id,
            "price": float(self.price) if self.price is not None else None,
            "copies": self.copies,
            "soldOut": self.sold_out,
        }


# sold_out always mirrors copies, whatever the caller passed in
@event.listens_for(StoreBook, "before_insert")
@event.listens_for(StoreBook, "before_update")
def _sync_sold_out(_mapper, _connection, target: StoreBook) -> None:
    target.sold_out = (target.copies or 0) <= 0

from decimal import Decimal

import factory
from factory.alchemy import SQLAlchemyModelFactory

from db.models import Author, Book, Store, StoreBook


class _Base(SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_persistence = "commit"


class StoreFactory(_Base):
    """Factory for creating Store instances."""

    class Meta:
        model = Store

    name = factory.Sequence(lambda n: f"Store {n}")
    address = factory.Sequence(lambda n: f"{n} Main Street")
    logo = None


class AuthorFactory(_Base):
    """Factory for creating Author instances."""

    class Meta:
        model = Author

    name = factory.Sequence(lambda n: f"Author {n}")


class BookFactory(_Base):
    """Factory for creating Book instances."""

    class Meta:
        model = Book

    name = factory.Sequence(lambda n: f"Book {n}")
    pages = factory.Faker("random_int", min=50, max=900)
    author = factory.SubFactory(AuthorFactory)


class StoreBookFactory(_Base):
    """Factory for creating stock records."""

    class Meta:
        model = StoreBook

    store = factory.SubFactory(StoreFactory)
    book = factory.SubFactory(BookFactory)
    price = Decimal("9.99")
    copies = 1


ALL_FACTORIES = (StoreFactory, AuthorFactory, BookFactory, StoreBookFactory)


def bind_session(session):
    for f in ALL_FACTORIES:
        f._meta.sqlalchemy_session = session


HEADER = ["store_name", "store_address", "book_name", "pages", "author_name", "price", "logo"]


def inventory_csv(rows, header=HEADER) -> bytes:
    """Build CSV bytes from row tuples (missing trailing cells become empty)."""
    lines = [",".join(header)]
    for row in rows:
        cells = [str(c) for c in row] + [""] * (len(header) - len(row))
        lines.append(",".join(cells))
    return ("\n".join(lines) + "\n").encode("utf-8")

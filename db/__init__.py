"""
db - Database layer.

Public API:
    init_db()       → create engine + tables
    get_session()   → new Session
    stores / authors / books / store_books → per-entity gateways
    Store, Author, Book, StoreBook → ORM models
"""

from db.engine import init_db, get_session, ping                      # noqa: F401
from db.models import Base, Author, Book, Store, StoreBook            # noqa: F401
from db.gateway import Gateway, stores, authors, books, store_books   # noqa: F401

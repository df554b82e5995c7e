"""
db.gateway - Generic data-access gateway, instantiated once per entity.

Every operation accepts an optional ``session``.  When one is given the
gateway only flushes; committing or rolling back stays with the caller,
which lets the import engine wrap several gateways in a single
per-row transaction.  Without a session the gateway opens a short-lived
one and commits it itself.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generic, Iterator, Optional, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db.engine import get_session
from db.models import Author, Book, Store, StoreBook

T = TypeVar("T")


class Gateway(Generic[T]):

    def __init__(self, model: type[T], key: Sequence[str]):
        self.model = model
        self.key = tuple(key)

    # ── Session scoping ────────────────────────────────────────────────

    @contextmanager
    def _scope(self, session: Optional[Session]) -> Iterator[Session]:
        if session is not None:
            yield session
            return

        own = get_session()
        try:
            yield own
            own.commit()
        except Exception:
            own.rollback()
            raise
        finally:
            own.close()

    def _where(self, criteria: Optional[dict]):
        stmt = select(self.model)
        for attr, val in (criteria or {}).items():
            stmt = stmt.where(getattr(self.model, attr) == val)
        return stmt

    # ── Reads ──────────────────────────────────────────────────────────

    def find_by_id(self, id_: str, session: Optional[Session] = None) -> Optional[T]:
        with self._scope(session) as s:
            return s.get(self.model, id_)

    def find_one(self, criteria: dict, session: Optional[Session] = None) -> Optional[T]:
        with self._scope(session) as s:
            return s.scalars(self._where(criteria).limit(1)).first()

    def find_all(
        self,
        criteria: Optional[dict] = None,
        session: Optional[Session] = None,
        *,
        order_by: Any = None,
        limit: Optional[int] = None,
    ) -> list[T]:
        stmt = self._where(criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._scope(session) as s:
            return list(s.scalars(stmt).all())

    def count(self, criteria: Optional[dict] = None, session: Optional[Session] = None) -> int:
        stmt = select(func.count()).select_from(self._where(criteria).subquery())
        with self._scope(session) as s:
            return s.scalar(stmt) or 0

    # ── Writes ─────────────────────────────────────────────────────────

    def create(self, data: dict, session: Optional[Session] = None) -> T:
        with self._scope(session) as s:
            obj = self.model(**data)
            s.add(obj)
            s.flush()
            return obj

    def find_or_create(
        self,
        key: dict,
        defaults: Optional[dict] = None,
        session: Optional[Session] = None,
    ) -> tuple[T, bool]:
        """
        Return ``(instance, created)`` for the row matching ``key``.

        The insert runs inside a SAVEPOINT: if a concurrent writer inserted
        the same key first, only the savepoint is rolled back and the
        winning row is returned.
        """
        missing = set(self.key) - set(key)
        if missing:
            raise ValueError(f"{self.model.__name__} key requires {sorted(missing)}")

        with self._scope(session) as s:
            existing = s.scalars(self._where(key).limit(1)).first()
            if existing is not None:
                return existing, False

            obj = self.model(**{**(defaults or {}), **key})
            try:
                with s.begin_nested():
                    s.add(obj)
            except IntegrityError:
                winner = s.scalars(self._where(key).limit(1)).first()
                if winner is None:
                    raise
                return winner, False
            return obj, True

    def update(self, id_: str, data: dict, session: Optional[Session] = None) -> Optional[T]:
        with self._scope(session) as s:
            obj = s.get(self.model, id_)
            if obj is None:
                return None
            for attr, val in data.items():
                setattr(obj, attr, val)
            s.flush()
            return obj


# ── One gateway per entity ─────────────────────────────────────────────
stores      = Gateway(Store, key=("name",))
authors     = Gateway(Author, key=("name",))
books       = Gateway(Book, key=("name", "author_id"))
store_books = Gateway(StoreBook, key=("store_id", "book_id"))

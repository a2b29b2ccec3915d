"""
Persistence handle used by the data migrations.

``Store`` wraps a SQLAlchemy session behind the small set of primitives the
migrations need (find/count/exists/create) and translates driver errors into
``teamboard.core.exceptions`` types. It is constructed explicitly and passed
down; ``open_store`` scopes it to an app context and always releases the
session.

Usage:
    with open_store(app) as store:
        report = run_migration(LabelMigration(), store)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from teamboard.core.exceptions import StoreError, UniqueConstraintViolation
from teamboard.models import db

logger = logging.getLogger(__name__)

_PG_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True for duplicate-key errors; FK / NOT NULL violations return False."""
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode:
        return pgcode == _PG_UNIQUE_VIOLATION
    return "unique" in str(exc.orig).lower()


def _table_of(entity):
    return getattr(entity, "__table__", entity)


class Store:
    """Thin CRUD facade over a SQLAlchemy session."""

    def __init__(self, session):
        self.session = session

    # ── Reads ────────────────────────────────────────────────────────────

    def find_many(self, model, *criteria, order_by=None, limit=None, **filters) -> list:
        """Return rows matching the filters, ordered by primary key unless told otherwise."""
        query = self.session.query(model).filter(*criteria).filter_by(**filters)
        query = query.order_by(order_by if order_by is not None else model.id.asc())
        if limit is not None:
            query = query.limit(limit)
        try:
            return query.all()
        except SQLAlchemyError as exc:
            raise StoreError("find_many", model.__name__, exc) from exc

    def find_unique(self, model, **unique_key):
        """Return the single row for a unique key, or None."""
        try:
            return self.session.query(model).filter_by(**unique_key).one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("find_unique", model.__name__, exc) from exc

    def count(self, model, *criteria, **filters) -> int:
        try:
            return self.session.query(model).filter(*criteria).filter_by(**filters).count()
        except SQLAlchemyError as exc:
            raise StoreError("count", model.__name__, exc) from exc

    def exists(self, entity, **filters) -> bool:
        """Single ``SELECT EXISTS`` against a model or a plain table (e.g. an association table)."""
        table = _table_of(entity)
        clause = sa.exists().select_from(table)
        for column, value in filters.items():
            clause = clause.where(table.c[column] == value)
        try:
            return bool(self.session.execute(sa.select(clause)).scalar())
        except SQLAlchemyError as exc:
            raise StoreError("exists", table.name, exc) from exc

    # ── Writes ───────────────────────────────────────────────────────────

    def create(self, model, **fields):
        """
        Insert one row inside a savepoint and return it.

        Raises:
            UniqueConstraintViolation: a unique key already exists.
            StoreError: any other database error, or fields the model rejects.

        The savepoint is rolled back on failure, so the surrounding
        transaction stays usable for the next insert.
        """
        try:
            record = model(**fields)
        except (TypeError, ValueError) as exc:
            raise StoreError("create", model.__name__, exc) from exc
        try:
            with self.session.begin_nested():
                self.session.add(record)
                self.session.flush()
        except IntegrityError as exc:
            if _is_unique_violation(exc):
                raise UniqueConstraintViolation(model.__name__, fields, exc) from exc
            raise StoreError("create", model.__name__, exc) from exc
        except SQLAlchemyError as exc:
            raise StoreError("create", model.__name__, exc) from exc
        return record

    # ── Transaction control ──────────────────────────────────────────────

    def commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StoreError("commit", "session", exc) from exc

    def rollback(self):
        self.session.rollback()


@contextmanager
def open_store(app):
    """
    Yield a ``Store`` bound to ``db.session`` inside an app context.

    Commits on normal exit, rolls back on any exception, and removes the
    session on every path.
    """
    with app.app_context():
        store = Store(db.session)
        try:
            yield store
            store.commit()
        except Exception:
            db.session.rollback()
            raise
        finally:
            db.session.remove()
            logger.debug("Store session released")

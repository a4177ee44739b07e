"""
Relational data store backed by SQLAlchemy.

Talks to the hosted Postgres backend, whose schema, views and cascades are
owned by the backend itself. One session per call: committed when the call
succeeds, rolled back when it fails.
"""

import logging
from contextlib import contextmanager

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from hamsafar.database import SessionLocal
from hamsafar.errors import UNIQUE_VIOLATION, DataSourceError, UniqueViolation
from hamsafar.models import TABLES
from hamsafar.store import DataStore

logger = logging.getLogger(__name__)

UPSERT_DIALECTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


def is_unique_violation(exc):
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    if getattr(orig, "sqlite_errorname", None) in ("SQLITE_CONSTRAINT_PRIMARYKEY", "SQLITE_CONSTRAINT_UNIQUE"):
        return True
    return "UNIQUE constraint failed" in str(orig)


def _to_dict(obj):
    return {attr.key: getattr(obj, attr.key) for attr in sa_inspect(obj).mapper.column_attrs}


class SqlStore(DataStore):
    name = "sql"

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    @contextmanager
    def session(self):
        db = self.session_factory()
        try:
            yield db
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if is_unique_violation(exc):
                raise UniqueViolation(str(exc.orig)) from exc
            raise DataSourceError(str(exc.orig), code=getattr(exc.orig, "pgcode", None)) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            raise DataSourceError(str(exc)) from exc
        finally:
            db.close()

    def _model(self, table):
        model = TABLES.get(table)
        if model is None:
            raise DataSourceError(f"Unknown table: {table}")
        return model

    def select(self, table, filters=None, order_by=None, descending=False):
        model = self._model(table)
        with self.session() as db:
            query = db.query(model).filter_by(**(filters or {}))
            if order_by:
                column = getattr(model, order_by)
                query = query.order_by(column.desc() if descending else column.asc())
            elif "id" in model.__table__.c:
                # Child rows come back in the order they were written
                query = query.order_by(model.__table__.c.id)
            return [_to_dict(row) for row in query.all()]

    def insert(self, table, rows):
        model = self._model(table)
        with self.session() as db:
            objects = [model(**row) for row in rows]
            db.add_all(objects)
            db.flush()
            return [_to_dict(obj) for obj in objects]

    def update(self, table, values, filters):
        model = self._model(table)
        with self.session() as db:
            return db.query(model).filter_by(**filters).update(values, synchronize_session=False)

    def delete(self, table, filters):
        model = self._model(table)
        with self.session() as db:
            return db.query(model).filter_by(**filters).delete(synchronize_session=False)

    def upsert(self, table, row, conflict):
        model = self._model(table)
        conflict = list(conflict)
        with self.session() as db:
            dialect = db.get_bind().dialect.name
            insert = UPSERT_DIALECTS.get(dialect)
            if insert is None:
                raise DataSourceError(f"Upsert is not supported on {dialect}")
            statement = insert(model).values(**row).on_conflict_do_update(
                index_elements=conflict,
                set_={column: value for column, value in row.items() if column not in conflict},
            )
            db.execute(statement)
            stored = db.query(model).filter_by(**{column: row[column] for column in conflict}).one()
            logger.debug("Upserted %s row %s", table, {column: row[column] for column in conflict})
            return _to_dict(stored)

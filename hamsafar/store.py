"""
Data-source capability interface.

The read and write accessors only ever talk to a ``DataStore``. Which
implementation backs it (the in-memory demo store or the relational backend)
is decided once per process from ``settings``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from hamsafar.config import settings

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class DataStore(ABC):
    """Table-level operations shared by every data source.

    Rows are plain dicts keyed by column name. Filters are equality
    predicates combined with AND. Views (``posts_with_rating``,
    ``profiles_with_counts``) are selectable like tables.

    Failures raise ``DataSourceError``; duplicate keys raise ``UniqueViolation``.
    """

    name = "abstract"

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        pass

    @abstractmethod
    def insert(self, table: str, rows: List[Row]) -> List[Row]:
        """Insert rows and return them as stored, with generated keys filled in."""
        pass

    @abstractmethod
    def update(self, table: str, values: Row, filters: Row) -> int:
        pass

    @abstractmethod
    def delete(self, table: str, filters: Row) -> int:
        """Delete matching rows; owned child rows go with them."""
        pass

    @abstractmethod
    def upsert(self, table: str, row: Row, conflict: Iterable[str]) -> Row:
        """Insert a row, or overwrite the one sharing its ``conflict`` columns."""
        pass


_store: Optional[DataStore] = None


def create_store() -> DataStore:
    if settings.use_mock_data:
        from hamsafar.mock_store import MockStore

        logger.info("Using in-memory mock data store")
        return MockStore()

    from hamsafar.sql_store import SqlStore

    logger.info("Using relational data store")
    return SqlStore()


def get_store() -> DataStore:
    global _store
    if _store is None:
        _store = create_store()
    return _store


def set_store(store: Optional[DataStore]):
    global _store
    _store = store


def reset_store():
    set_store(None)

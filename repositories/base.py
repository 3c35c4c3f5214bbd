"""
Base repository for the storage access layer.

Repositories issue one parameterized statement per call and hand back raw rows
as plain dicts, exactly as the driver encodes them. They do no coercion,
defaulting or renaming; that belongs to the record mappers.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from app.exceptions import EmptyUpdateError, StorageError
from domain.fields import UNSET

logger = logging.getLogger("nutrilog.storage")


def build_set_clause(pairs: Sequence[Tuple[str, Any]]) -> dict:
    """Keep only the bound ``(column, value)`` pairs.

    ``None`` is a bound value (it clears the column); ``UNSET`` is not.

    Raises:
        EmptyUpdateError: if no pair is bound
    """
    assignments = {column: value for column, value in pairs if value is not UNSET}
    if not assignments:
        raise EmptyUpdateError()
    return assignments


class BaseRepository:
    """
    Base repository providing the single-statement operations every table shares.
    All repositories should inherit from this class.
    """

    def __init__(self, engine: Engine, table: Table):
        self.engine = engine
        self.table = table

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        """Check out a pooled connection for one statement, committing on success."""
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as exc:
            message = str(getattr(exc, "orig", None) or exc)
            logger.error(f"statement_failed table={self.table.name} error={message}")
            raise StorageError(message, details={"table": self.table.name}) from exc

    def _fetch_one(self, statement) -> Optional[dict]:
        with self._connection() as conn:
            row = conn.execute(statement).mappings().first()
        return dict(row) if row is not None else None

    def _fetch_all(self, statement) -> List[dict]:
        with self._connection() as conn:
            rows = conn.execute(statement).mappings().all()
        return [dict(row) for row in rows]

    def _upsert_statement(self):
        """Dialect-specific INSERT supporting ``ON CONFLICT DO UPDATE``."""
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            return postgresql.insert(self.table)
        if dialect == "sqlite":
            return sqlite.insert(self.table)
        raise StorageError(f"Upsert is not supported on dialect '{dialect}'")

    def find_by_id(self, entity_id: str) -> Optional[dict]:
        """Row with the given id, or None."""
        return self._fetch_one(select(self.table).where(self.table.c.id == entity_id))

    def find_all(self) -> List[dict]:
        """Every row, ordered by id"""
        return self._fetch_all(select(self.table).order_by(self.table.c.id))

    def create(self, values: Mapping[str, Any]) -> dict:
        """Insert one row and return it as stored"""
        statement = insert(self.table).values(**values).returning(*self.table.c)
        return self._fetch_one(statement)

    def update_by_id(
        self,
        entity_id: str,
        pairs: Sequence[Tuple[str, Any]],
        extra: Optional[Mapping[str, Any]] = None,
    ) -> Optional[dict]:
        """
        Apply the bound pairs to one row.

        Args:
            entity_id: row id
            pairs: ``(column, value)`` pairs; ``UNSET`` values are skipped
            extra: server-side assignments added to every non-empty update

        Returns:
            The updated row, or None if no row has that id

        Raises:
            EmptyUpdateError: if no pair is bound
        """
        assignments = build_set_clause(pairs)
        if extra:
            assignments.update(extra)
        statement = (
            update(self.table)
            .where(self.table.c.id == entity_id)
            .values(**assignments)
            .returning(*self.table.c)
        )
        return self._fetch_one(statement)

    def delete_by_id(self, entity_id: str) -> bool:
        """Delete one row. Returns True if a row was removed."""
        with self._connection() as conn:
            result = conn.execute(delete(self.table).where(self.table.c.id == entity_id))
        return (result.rowcount or 0) > 0

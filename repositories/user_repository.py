"""
User Repository - Data access layer for profiles and weight history
"""

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from repositories.base import BaseRepository
from domain.models import UserRecord, WeightHistoryRecord


class UserRepository(BaseRepository):
    """Repository for the ``users`` table"""

    def __init__(self, engine: Engine):
        super().__init__(engine, UserRecord.__table__)

    def find_by_email(self, email: str) -> Optional[dict]:
        """First profile row with this contact address, or None"""
        statement = (
            select(self.table)
            .where(self.table.c.email == email)
            .order_by(self.table.c.id)
            .limit(1)
        )
        return self._fetch_one(statement)

    def update_by_id(
        self,
        entity_id: str,
        pairs: Sequence[Tuple[str, Any]],
        extra: Optional[Mapping[str, Any]] = None,
    ) -> Optional[dict]:
        """Partial update that always refreshes ``updated_at``"""
        assignments = {"updated_at": func.now()}
        if extra:
            assignments.update(extra)
        return super().update_by_id(entity_id, pairs, extra=assignments)

    def upsert(
        self,
        values: Mapping[str, Any],
        overwrite: Sequence[str],
        merge: Sequence[str],
    ) -> dict:
        """
        Insert a profile row, or update the existing row with the same id.

        The merge decision is part of the statement itself, so concurrent
        upserts for one id are serialized by the row lock:

        - columns in ``overwrite`` take the incoming value unconditionally
        - columns in ``merge`` take the incoming value only when it is not NULL
        - ``updated_at`` is refreshed on every conflicting write

        Args:
            values: statement arguments keyed by column, including ``id``
            overwrite: columns replaced on conflict
            merge: columns coalesced with the stored value on conflict

        Returns:
            The row as stored after the write
        """
        statement = self._upsert_statement().values(**values)
        excluded = statement.excluded

        assignments = {column: excluded[column] for column in overwrite}
        for column in merge:
            assignments[column] = func.coalesce(excluded[column], self.table.c[column])
        assignments["updated_at"] = func.now()

        statement = statement.on_conflict_do_update(
            index_elements=[self.table.c.id], set_=assignments
        ).returning(*self.table.c)
        return self._fetch_one(statement)

    def create_if_absent(self, values: Mapping[str, Any]) -> dict:
        """Insert the row unless its id exists; return whichever row is stored."""
        statement = (
            self._upsert_statement()
            .values(**values)
            .on_conflict_do_nothing(index_elements=[self.table.c.id])
            .returning(*self.table.c)
        )
        row = self._fetch_one(statement)
        if row is None:
            row = self.find_by_id(values["id"])
        return row


class WeightHistoryRepository(BaseRepository):
    """Repository for the append-only ``weight_history`` table"""

    def __init__(self, engine: Engine):
        super().__init__(engine, WeightHistoryRecord.__table__)

    def find_by_user_id(self, user_id: str) -> List[dict]:
        """All points for a user, newest first"""
        statement = (
            select(self.table)
            .where(self.table.c.user_id == user_id)
            .order_by(
                self.table.c.date.desc(),
                self.table.c.created_at.desc(),
                self.table.c.id.desc(),
            )
        )
        return self._fetch_all(statement)

    def append(self, values: Mapping[str, Any]) -> dict:
        """Add one weight point"""
        return self.create(values)

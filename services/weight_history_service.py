from datetime import date, datetime, timezone
from typing import List, Optional, Union
import logging

from sqlalchemy.engine import Engine

from domain.mappers import WeightHistoryMapper
from domain.schemas.profile_schemas import WeightHistoryEntry
from repositories import WeightHistoryRepository

logger = logging.getLogger("nutrilog.weight")


class WeightHistoryService:
    """Append-only weight history"""

    @staticmethod
    def on_weight_change(
        engine: Engine,
        user_id: str,
        weight: float,
        on: Optional[Union[date, str]] = None,
    ) -> WeightHistoryEntry:
        """
        Record one weight measurement for a profile.

        Called after a profile write that carried a valid weight. The point is
        dated ``on``, or today (UTC) when not given.
        """
        if on is None:
            on = datetime.now(timezone.utc).date()

        repo = WeightHistoryRepository(engine)
        row = repo.append(
            WeightHistoryMapper.to_write_args(
                {"user_id": user_id, "weight": weight, "date": on}
            )
        )
        entry = WeightHistoryMapper.from_row(row)
        logger.info(
            f"weight_recorded user_id={user_id} weight={entry.weight} date={entry.date}"
        )
        return entry

    @staticmethod
    def get_history(engine: Engine, user_id: str) -> List[WeightHistoryEntry]:
        """All points for a profile, newest first"""
        repo = WeightHistoryRepository(engine)
        return [WeightHistoryMapper.from_row(row) for row in repo.find_by_user_id(user_id)]

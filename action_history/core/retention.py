"""
Retention: deletes records older than a cutoff, per user on request and
globally from the scheduled sweep. Cutoffs are always computed in UTC.
"""

from datetime import datetime
from typing import Callable, Optional

from util.logging import logger
from .config import RetentionConfig
from .errors import HistoryError
from .mapper import format_timestamp, hours_before
from .query import utc_now
from .store import Store


class RetentionSweeper:

    def __init__(self, store: Store, config: RetentionConfig, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.config = config
        self.clock = clock

    def cutoff(self, after_hours: int) -> datetime:
        return hours_before(self.clock(), after_hours)

    async def delete_for_user(self, user_id: str, after_hours: int, request_id: Optional[str] = None) -> int:
        """Delete the user's records created before now - after_hours."""
        before = self.cutoff(after_hours)
        try:
            deleted = await self.store.delete_before(user_id, before)
        except HistoryError:
            logger.error_log(request_id, "Deletion of actions cannot be executed for user", user_id)
            raise
        logger.log_action_operation("delete", user_id, details={
            "cutoff": format_timestamp(before),
            "deleted": deleted
        })
        return deleted

    async def sweep_all(self, after_hours: Optional[int] = None) -> int:
        """Delete every record created before now - after_hours (default: save interval)."""
        if after_hours is None:
            after_hours = self.config.save_interval
        before = self.cutoff(after_hours)
        try:
            deleted = await self.store.delete_before(None, before)
        except HistoryError as e:
            logger.log_sweep(format_timestamp(before), 0, status="failed", details={"error": e.detail})
            raise
        logger.log_sweep(format_timestamp(before), deleted)
        return deleted

"""
Windowed, paginated listing of action records.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from util.logging import logger
from .config import RetentionConfig
from .errors import HistoryError, ValidationError
from .mapper import hours_before, to_record, to_response_item
from .schema import ActionPage, ResponseItem
from .store import Store

# SQLite binds integers as signed 64-bit
MAX_OFFSET = 2 ** 63 - 1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QueryEngine:
    """Creates records and lists them by time window and page."""

    def __init__(self, store: Store, config: RetentionConfig, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.config = config
        self.clock = clock

    async def create(self, user_id: str, payload: Dict[str, Any], created_at: datetime,
                     request_id: Optional[str] = None) -> ResponseItem:
        try:
            stored = await self.store.insert(to_record(user_id, payload, created_at))
        except HistoryError:
            logger.error_log(request_id, "Action cannot be created for user with id", user_id)
            raise
        logger.log_action_operation("create", user_id, details={"id": stored.id})
        return to_response_item(stored, self.config.save_interval)

    async def list_for_user(self, user_id: str, page: int, page_size: int, show_last_hours: int,
                            request_id: Optional[str] = None) -> ActionPage:
        return await self._list(user_id, page, page_size, show_last_hours, request_id)

    async def list_all(self, page: int, page_size: int, show_last_hours: int,
                       request_id: Optional[str] = None) -> ActionPage:
        """Global listing across all users; no ownership filter."""
        return await self._list(None, page, page_size, show_last_hours, request_id)

    def window_start(self, show_last_hours: int) -> datetime:
        """Lower bound of the window. Negative hours move it into the future."""
        return hours_before(self.clock(), show_last_hours)

    def validate_paging(self, page: int, page_size: int):
        if page < 1:
            raise ValidationError(f"page must be >= 1, got {page}")
        if not 1 <= page_size <= self.config.max_page_size:
            raise ValidationError(
                f"pageSize must be between 1 and {self.config.max_page_size}, got {page_size}"
            )
        if (page - 1) * page_size > MAX_OFFSET:
            raise ValidationError(f"page {page} is beyond the last addressable row")

    async def _list(self, user_id: Optional[str], page: int, page_size: int, show_last_hours: int,
                    request_id: Optional[str]) -> ActionPage:
        self.validate_paging(page, page_size)
        after = self.window_start(show_last_hours)
        offset = (page - 1) * page_size

        try:
            records = await self.store.find_window(user_id, after, offset, page_size)
        except HistoryError:
            logger.error_log(request_id, "Get actions cannot be executed for user with id", user_id or "*")
            raise

        items = [to_response_item(r, self.config.save_interval) for r in records]
        # count is the size of this page, not the total number of matches
        logger.log_action_operation("list", user_id, details={"page": page, "count": len(items)})
        return ActionPage(items=items, count=len(items))

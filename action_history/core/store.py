"""
Store interface for action records and its SQLite implementation.

The engine suspends only at these calls; the SQLite work runs in a worker
thread with a connection per operation.
"""

import asyncio
import sqlite3
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from .db import get_db, init_db
from .errors import StoreFailure
from .mapper import format_timestamp, from_row, to_row
from .schema import ActionRecord


class Store(ABC):
    """Narrow persistence contract used by the query and retention engines."""

    def initialize(self):
        """Prepare storage before the first request."""

    @abstractmethod
    async def insert(self, record: ActionRecord) -> ActionRecord:
        """Persist a record and return it with its assigned id."""

    @abstractmethod
    async def find_window(self, user_id: Optional[str], after: datetime, offset: int, limit: int) -> List[ActionRecord]:
        """Records with created_at >= after, newest first, optionally for one user."""

    @abstractmethod
    async def delete_before(self, user_id: Optional[str], before: datetime) -> int:
        """Delete records with created_at < before and return how many went."""


class SqliteActionStore(Store):
    """Action records in a single SQLite table."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def initialize(self):
        init_db(self.db_path)

    async def insert(self, record: ActionRecord) -> ActionRecord:
        return await asyncio.to_thread(self._insert, record)

    async def find_window(self, user_id: Optional[str], after: datetime, offset: int, limit: int) -> List[ActionRecord]:
        return await asyncio.to_thread(self._find_window, user_id, after, offset, limit)

    async def delete_before(self, user_id: Optional[str], before: datetime) -> int:
        return await asyncio.to_thread(self._delete_before, user_id, before)

    def _insert(self, record: ActionRecord) -> ActionRecord:
        stored = replace(record, id=str(uuid.uuid4()))
        try:
            with get_db(self.db_path) as conn:
                conn.execute(
                    "INSERT INTO actions (id, user_id, created_at, action) VALUES (?, ?, ?, ?)",
                    to_row(stored)
                )
                conn.commit()
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise StoreFailure(f"Insert failed: {e}") from e
        return stored

    def _find_window(self, user_id: Optional[str], after: datetime, offset: int, limit: int) -> List[ActionRecord]:
        query = "SELECT id, user_id, created_at, action FROM actions WHERE created_at >= ?"
        params = [format_timestamp(after)]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        query += " ORDER BY created_at DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        try:
            with get_db(self.db_path) as conn:
                rows = conn.execute(query, params).fetchall()
                return [from_row(row) for row in rows]
        except (sqlite3.Error, ValueError) as e:
            raise StoreFailure(f"Query failed: {e}") from e

    def _delete_before(self, user_id: Optional[str], before: datetime) -> int:
        query = "DELETE FROM actions WHERE created_at < ?"
        params = [format_timestamp(before)]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)

        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(query, params)
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            raise StoreFailure(f"Delete failed: {e}") from e

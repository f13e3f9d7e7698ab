"""
Shared fixtures: a fixed clock, a temporary SQLite store and a seeding helper.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from action_history.core.config import RetentionConfig
from action_history.core.mapper import to_record
from action_history.core.store import SqliteActionStore

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock():
    return NOW


def sample_action(i: int) -> dict:
    return {
        "type": "Instantiation",
        "action": "create",
        "message": f"action{i}",
        "downStreamId": str(i),
        "downStreamSystem": "SO",
    }


@pytest.fixture
def config(tmp_path):
    return RetentionConfig(
        db_path=str(tmp_path / "history.db"),
        save_interval=72,
        sweep_enabled=False,
        default_page_size=10,
        max_page_size=100,
        log_requests=True,
    )


@pytest.fixture
def store(config):
    s = SqliteActionStore(config.db_path)
    s.initialize()
    return s


@pytest.fixture
def seed(store):
    """Insert one record per hour offset for a user; positive offsets are in the past."""
    def _seed(user_id: str, hours_ago, base: datetime = NOW):
        records = []
        for i, hours in enumerate(hours_ago, start=1):
            record = to_record(user_id, sample_action(i), base - timedelta(hours=hours))
            records.append(asyncio.run(store.insert(record)))
        return records
    return _seed

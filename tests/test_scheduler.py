"""
Cron scheduling of the retention sweep.
"""

import asyncio
from datetime import timedelta

import pytest
from unittest.mock import AsyncMock

from action_history.core.scheduler import (
    register_task,
    unregister_task,
    list_tasks,
    should_run_task,
    run_task,
    start,
    stop,
    get_status,
)

from conftest import NOW


@pytest.fixture(autouse=True)
def reset_scheduler():
    """Reset scheduler state between tests."""
    from action_history.core import scheduler
    scheduler.tasks.clear()
    scheduler.running = False
    scheduler.shutdown_event = None
    yield
    scheduler.tasks.clear()


class TestRegistration:

    def test_register_task_valid(self):
        register_task("sweep", "0 * * * *", AsyncMock(), now=NOW)

        assert list_tasks() == ["sweep"]

    def test_register_task_invalid_func(self):
        with pytest.raises(ValueError, match="Task function must be callable"):
            register_task("bad", "0 * * * *", "not_callable")

    def test_register_task_invalid_cron(self):
        with pytest.raises(ValueError, match="Invalid cron expression"):
            register_task("bad", "every hour", AsyncMock())

    def test_register_duplicate_replaces(self):
        register_task("sweep", "0 * * * *", AsyncMock(), now=NOW)
        register_task("sweep", "*/5 * * * *", AsyncMock(), now=NOW)

        assert len(list_tasks()) == 1
        assert get_status()["tasks"]["sweep"]["cron"] == "*/5 * * * *"

    def test_unregister_task(self):
        register_task("sweep", "0 * * * *", AsyncMock(), now=NOW)
        unregister_task("sweep")
        unregister_task("nonexistent")

        assert list_tasks() == []


class TestScheduling:

    def test_first_fire_time_follows_cron(self):
        from action_history.core import scheduler
        register_task("sweep", "0 * * * *", AsyncMock(), now=NOW + timedelta(minutes=10))

        assert scheduler.tasks["sweep"]["next_run"] == NOW + timedelta(hours=1)

    def test_should_run_only_when_due(self):
        from action_history.core import scheduler
        register_task("sweep", "0 * * * *", AsyncMock(), now=NOW)
        task_info = scheduler.tasks["sweep"]

        assert should_run_task(task_info, NOW + timedelta(minutes=30)) is False
        assert should_run_task(task_info, NOW + timedelta(hours=1)) is True

    def test_run_task_advances_schedule(self):
        from action_history.core import scheduler
        func = AsyncMock()
        register_task("sweep", "0 * * * *", func, now=NOW)
        task_info = scheduler.tasks["sweep"]
        fire_at = NOW + timedelta(hours=1)

        asyncio.run(run_task("sweep", task_info, fire_at))

        func.assert_awaited_once()
        assert task_info["last_run"] == fire_at
        assert task_info["next_run"] == NOW + timedelta(hours=2)

    def test_run_task_failure_is_swallowed(self):
        """A failing sweep is logged and the next run is still scheduled."""
        from action_history.core import scheduler
        register_task("sweep", "0 * * * *", AsyncMock(side_effect=RuntimeError("store down")), now=NOW)
        task_info = scheduler.tasks["sweep"]
        fire_at = NOW + timedelta(hours=1)

        asyncio.run(run_task("sweep", task_info, fire_at))

        assert task_info["last_run"] == fire_at
        assert task_info["next_run"] == NOW + timedelta(hours=2)


class TestLoop:

    def test_start_runs_due_task_and_stops(self):
        func = AsyncMock()
        # registered long ago, so the first fire time has passed
        register_task("sweep", "0 0 1 1 *", func, now=NOW - timedelta(days=3650))

        async def scenario():
            loop_task = asyncio.create_task(start())
            await asyncio.sleep(0.05)
            assert get_status()["status"] == "running"
            stop()
            await asyncio.wait_for(loop_task, timeout=2)

        asyncio.run(scenario())

        func.assert_awaited_once()
        assert get_status()["status"] == "stopped"

    def test_start_twice_raises(self):
        async def scenario():
            loop_task = asyncio.create_task(start())
            await asyncio.sleep(0.01)
            with pytest.raises(RuntimeError, match="already running"):
                await start()
            stop()
            await asyncio.wait_for(loop_task, timeout=2)

        asyncio.run(scenario())

    def test_stop_when_not_running(self):
        stop()
        assert get_status()["status"] == "stopped"

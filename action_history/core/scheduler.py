"""
Cron-driven task loop for the retention sweep.

Tasks are registered by name with a cron expression and an async callable.
The loop polls cooperatively; a failing task is logged and the loop
carries on with the next fire time.
"""

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from croniter import croniter

from util.logging import logger
from .query import utc_now

TICK_SEC = 1.0

tasks: Dict[str, Dict] = {}  # task_name -> {func, cron, last_run, next_run}
running = False
shutdown_event: Optional[asyncio.Event] = None


def next_fire_time(cron_expression: str, base: datetime) -> datetime:
    return croniter(cron_expression, base).get_next(datetime)


def register_task(name: str, cron_expression: str, func: Callable[[], Awaitable], now: datetime = None):
    """
    Register a task to be executed on a cron schedule.

    Args:
        name: Unique task identifier; re-registering replaces the task
        cron_expression: Five-field cron expression, evaluated in UTC
        func: Async callable taking no arguments
        now: Base time for the first fire time (defaults to current UTC time)
    """
    if not callable(func):
        raise ValueError(f"Task function must be callable: {func}")

    if not croniter.is_valid(cron_expression):
        raise ValueError(f"Invalid cron expression: {cron_expression}")

    base = now or utc_now()
    tasks[name] = {
        "func": func,
        "cron": cron_expression,
        "last_run": None,
        "next_run": next_fire_time(cron_expression, base)
    }

    logger.info(f"Registered scheduled task '{name}' ({cron_expression})")


def unregister_task(name: str):
    """Remove a task from the registry."""
    if name in tasks:
        del tasks[name]
        logger.info(f"Unregistered scheduled task '{name}'")


def list_tasks():
    """Return list of registered task names."""
    return list(tasks.keys())


def should_run_task(task_info: Dict, now: datetime) -> bool:
    """Check if a task is due at the given time."""
    return now >= task_info["next_run"]


async def run_task(name: str, task_info: Dict, now: datetime):
    """Execute a task, swallow and log its failure, and schedule the next run."""
    try:
        await task_info["func"]()
    except Exception as e:
        logger.error(f"Scheduled task '{name}' failed: {e}")
    finally:
        task_info["last_run"] = now
        task_info["next_run"] = next_fire_time(task_info["cron"], now)


async def start():
    """Run the scheduling loop until stop() is called."""
    global running, shutdown_event

    if running:
        raise RuntimeError("Scheduler already running")

    running = True
    shutdown_event = asyncio.Event()
    logger.info(f"Starting scheduler with tasks: {list_tasks()}")

    try:
        while not shutdown_event.is_set():
            now = utc_now()
            for name, task_info in list(tasks.items()):
                if should_run_task(task_info, now):
                    await run_task(name, task_info, now)

            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=TICK_SEC)
            except asyncio.TimeoutError:
                pass
    finally:
        running = False
        logger.info("Scheduler stopped")


def stop():
    """Signal the scheduling loop to exit."""
    global running

    if not running:
        return

    running = False
    if shutdown_event:
        shutdown_event.set()


def get_status():
    """Return current scheduler status for monitoring."""
    return {
        "status": "running" if running else "stopped",
        "tasks": {
            name: {
                "cron": info["cron"],
                "last_run": info["last_run"].isoformat() if info["last_run"] else None,
                "next_run": info["next_run"].isoformat()
            }
            for name, info in tasks.items()
        }
    }

#!/usr/bin/env python3
"""
One-off retention sweep: deletes every action older than the given number of
hours (default: the configured save interval) and exits.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from action_history.core.config import load_config, validate_config
from action_history.core.errors import HistoryError
from action_history.core.retention import RetentionSweeper
from action_history.core.store import SqliteActionStore


async def run(after_hours):
    config = load_config()
    issues = validate_config(config)
    if issues:
        raise SystemExit(f"Configuration invalid: {issues}")

    store = SqliteActionStore(config.db_path)
    store.initialize()
    sweeper = RetentionSweeper(store, config)
    return await sweeper.sweep_all(after_hours)


def main():
    parser = argparse.ArgumentParser(description="Delete action history older than a cutoff")
    parser.add_argument("--after-hours", type=int, default=None,
                        help="Delete actions created more than this many hours ago")
    args = parser.parse_args()

    try:
        deleted = asyncio.run(run(args.after_hours))
    except HistoryError as e:
        print(f"Sweep failed: {e.detail}")
        sys.exit(1)

    print(f"Deleted {deleted} actions")


if __name__ == "__main__":
    main()

"""
Process configuration for the action history service.
Read once from the environment at startup; passed explicitly into components.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from croniter import croniter
from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("HISTORY_DB_PATH", "./data/history.db")

# Debug flag exposes API docs and error text in 5xx problem documents
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Retention configuration
SAVE_INTERVAL_HOURS = int(os.getenv("HISTORY_SAVE_INTERVAL", "72"))
DELETE_INTERVAL_CRON = os.getenv("HISTORY_DELETE_INTERVAL", "0 * * * *")  # hourly
SWEEP_ENABLED = os.getenv("HISTORY_SWEEP_ENABLED", "true").lower() == "true"

# Paging configuration
DEFAULT_PAGE_SIZE = int(os.getenv("HISTORY_DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("HISTORY_MAX_PAGE_SIZE", "100"))

# Request/response logging
LOGGER_ENABLED = os.getenv("LOGGER_ENABLED", "true").lower() == "true"
LOGGER_EXCLUDE_PATHS = os.getenv("LOGGER_EXCLUDE_PATHS", "/health")

# Version string
VERSION = "1.0.0"


@dataclass(frozen=True)
class RetentionConfig:
    """Read-only configuration value threaded into the engine at construction."""
    save_interval: int = SAVE_INTERVAL_HOURS
    delete_schedule: str = DELETE_INTERVAL_CRON
    sweep_enabled: bool = SWEEP_ENABLED
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE
    db_path: str = DB_PATH
    debug: bool = DEBUG
    log_requests: bool = LOGGER_ENABLED
    log_exclude_paths: Tuple[str, ...] = field(default_factory=tuple)


def _split_paths(raw: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in raw.split(",") if p.strip())


def load_config() -> RetentionConfig:
    """Build the process configuration from the environment."""
    return RetentionConfig(
        save_interval=int(os.getenv("HISTORY_SAVE_INTERVAL", str(SAVE_INTERVAL_HOURS))),
        delete_schedule=os.getenv("HISTORY_DELETE_INTERVAL", DELETE_INTERVAL_CRON),
        sweep_enabled=os.getenv("HISTORY_SWEEP_ENABLED", str(SWEEP_ENABLED)).lower() == "true",
        default_page_size=int(os.getenv("HISTORY_DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE))),
        max_page_size=int(os.getenv("HISTORY_MAX_PAGE_SIZE", str(MAX_PAGE_SIZE))),
        db_path=os.getenv("HISTORY_DB_PATH", DB_PATH),
        debug=os.getenv("DEBUG", str(DEBUG)).lower() == "true",
        log_requests=os.getenv("LOGGER_ENABLED", str(LOGGER_ENABLED)).lower() == "true",
        log_exclude_paths=_split_paths(os.getenv("LOGGER_EXCLUDE_PATHS", LOGGER_EXCLUDE_PATHS)),
    )


def validate_config(config: RetentionConfig) -> List[str]:
    """Validate configuration and return any issues."""
    issues = []

    if config.save_interval < 1:
        issues.append("HISTORY_SAVE_INTERVAL must be >= 1")

    if not croniter.is_valid(config.delete_schedule):
        issues.append(f"Invalid HISTORY_DELETE_INTERVAL: {config.delete_schedule}")

    if config.max_page_size < 1:
        issues.append("HISTORY_MAX_PAGE_SIZE must be >= 1")

    if not 1 <= config.default_page_size <= config.max_page_size:
        issues.append("HISTORY_DEFAULT_PAGE_SIZE must be between 1 and HISTORY_MAX_PAGE_SIZE")

    return issues


def ensure_db_directory(db_path: str):
    """Ensure the database directory exists."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

"""
Configuration loading and validation.
"""

from dataclasses import replace

import pytest

from action_history.core.config import (
    RetentionConfig,
    ensure_db_directory,
    load_config,
    validate_config,
)


@pytest.fixture
def valid_config():
    return RetentionConfig(save_interval=72, delete_schedule="0 * * * *",
                           default_page_size=10, max_page_size=100)


def test_valid_config_has_no_issues(valid_config):
    assert validate_config(valid_config) == []


@pytest.mark.parametrize("changes, fragment", [
    ({"save_interval": 0}, "HISTORY_SAVE_INTERVAL"),
    ({"delete_schedule": "hourly"}, "HISTORY_DELETE_INTERVAL"),
    ({"max_page_size": 0}, "HISTORY_MAX_PAGE_SIZE"),
    ({"default_page_size": 0}, "HISTORY_DEFAULT_PAGE_SIZE"),
    ({"default_page_size": 200}, "HISTORY_DEFAULT_PAGE_SIZE"),
])
def test_invalid_values_reported(valid_config, changes, fragment):
    issues = validate_config(replace(valid_config, **changes))

    assert any(fragment in issue for issue in issues)


def test_load_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("HISTORY_DB_PATH", str(tmp_path / "h.db"))
    monkeypatch.setenv("HISTORY_SAVE_INTERVAL", "24")
    monkeypatch.setenv("HISTORY_DELETE_INTERVAL", "*/15 * * * *")
    monkeypatch.setenv("HISTORY_SWEEP_ENABLED", "false")
    monkeypatch.setenv("HISTORY_DEFAULT_PAGE_SIZE", "5")
    monkeypatch.setenv("HISTORY_MAX_PAGE_SIZE", "50")
    monkeypatch.setenv("LOGGER_EXCLUDE_PATHS", "/health, /docs")

    config = load_config()

    assert config.db_path == str(tmp_path / "h.db")
    assert config.save_interval == 24
    assert config.delete_schedule == "*/15 * * * *"
    assert config.sweep_enabled is False
    assert config.default_page_size == 5
    assert config.max_page_size == 50
    assert config.log_exclude_paths == ("/health", "/docs")
    assert validate_config(config) == []


def test_config_is_read_only(valid_config):
    with pytest.raises(AttributeError):
        valid_config.save_interval = 1


def test_ensure_db_directory(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "history.db"

    ensure_db_directory(str(db_path))

    assert db_path.parent.is_dir()

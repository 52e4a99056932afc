"""Unit tests for application settings configuration."""

from pathlib import Path

import pytest

from resource_api.config import (
    DEFAULT_BACKUP_FREQUENCY_HOURS,
    ModuleStorage,
    Settings,
    StorageKind,
)


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_defaults_are_memory_everywhere():
    storage = Settings(_env_file=None).storage_settings()
    for module in ("notes", "blog", "files", "vice_bank"):
        assert storage.for_module(module) == ModuleStorage()


def test_server_types_are_read_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("NOTES_SERVER_TYPE", "file")
    monkeypatch.setenv("NOTES_FILE_PATH", str(tmp_path))
    monkeypatch.setenv("BACKUP_FREQUENCY", "6")

    settings = Settings(_env_file=None)

    assert settings.storage_for("notes") == ModuleStorage(StorageKind.FILE, str(tmp_path))
    assert settings.backup_frequency_hours == 6


@pytest.mark.parametrize("raw", [None, "", "often", "0", "-4", "1.5"])
def test_invalid_backup_frequency_falls_back(raw):
    settings = Settings(_env_file=None, backup_frequency=raw)
    assert settings.backup_frequency_hours == DEFAULT_BACKUP_FREQUENCY_HOURS


def test_log_rotation_defaults():
    settings = Settings(_env_file=None)
    assert settings.log_max_size_bytes == 512 * 1024
    assert settings.log_backup_count == 5
    assert settings.log_cycle_interval_minutes == 60

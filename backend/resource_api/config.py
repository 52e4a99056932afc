import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)

DEFAULT_BACKUP_FREQUENCY_HOURS = 24

MODULES = ("notes", "blog", "files", "vice_bank")


class StorageKind(str, Enum):
    """Storage backends a resource module can run on."""

    MEMORY = "memory"
    FILE = "file"
    DATABASE = "mongo_db"


_KIND_ALIASES = {
    "memory": StorageKind.MEMORY,
    "file": StorageKind.FILE,
    "mongo_db": StorageKind.DATABASE,
    "database": StorageKind.DATABASE,
}


@dataclass(frozen=True)
class ModuleStorage:
    """Resolved backend choice for one resource module."""

    kind: StorageKind = StorageKind.MEMORY
    file_path: str | None = None


@dataclass(frozen=True)
class StorageSettings:
    """Backend choices for every module, resolved once at startup."""

    notes: ModuleStorage = ModuleStorage()
    blog: ModuleStorage = ModuleStorage()
    files: ModuleStorage = ModuleStorage()
    vice_bank: ModuleStorage = ModuleStorage()
    database_url: str | None = None

    def for_module(self, module: str) -> ModuleStorage:
        return getattr(self, module)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Resource API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Storage backend per module: memory | file | mongo_db
    notes_server_type: str = "memory"
    notes_file_path: str | None = None
    blog_server_type: str = "memory"
    blog_file_path: str | None = None
    files_server_type: str = "memory"
    files_file_path: str | None = None
    vice_bank_server_type: str = "memory"
    vice_bank_file_path: str | None = None

    # Document database (postgresql:// or sqlite:///)
    database_url: str | None = None

    # Hours between scheduled backups; non-numeric values fall back to 24
    backup_frequency: str | None = None

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine: SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_storage: str = "INFO"          # entity stores and persistence

    # Log file and rotation; no file logging when log_file_path is unset
    log_file_path: str | None = None
    log_max_size_bytes: int = 512 * 1024
    log_backup_count: int = 5
    log_cycle_interval_minutes: int = 60

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def backup_frequency_hours(self) -> int:
        try:
            hours = int(self.backup_frequency or "")
        except ValueError:
            return DEFAULT_BACKUP_FREQUENCY_HOURS
        return hours if hours > 0 else DEFAULT_BACKUP_FREQUENCY_HOURS

    def storage_for(self, module: str) -> ModuleStorage:
        """Resolve a module's backend, degrading to memory when config is incomplete."""
        raw_kind = (getattr(self, f"{module}_server_type") or "").strip().lower()
        file_path = getattr(self, f"{module}_file_path")

        kind = _KIND_ALIASES.get(raw_kind)
        if kind is None:
            _config_logger.warning(
                "Unknown storage type '%s' for %s; using memory", raw_kind, module
            )
            return ModuleStorage()
        if kind is StorageKind.FILE and not file_path:
            _config_logger.warning("No file path configured for %s; using memory", module)
            return ModuleStorage()
        if kind is StorageKind.DATABASE and not self.database_url:
            _config_logger.warning("No database URL configured for %s; using memory", module)
            return ModuleStorage()
        return ModuleStorage(kind=kind, file_path=file_path)

    def storage_settings(self) -> StorageSettings:
        return StorageSettings(
            **{module: self.storage_for(module) for module in MODULES},
            database_url=self.database_url,
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()

"""Centralized logging configuration.

Applies per-category log levels from Settings so that noisy loggers
(e.g. SQLAlchemy SQL statements) can be silenced without affecting other
parts of the application, and optionally mirrors every record to a log file
whose rotation is driven by ``LogCycler``.

Usage:
    from resource_api.infrastructure.logging.log_config import setup_logging
    handler = setup_logging(settings)   # Call once at startup (in the lifespan)
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from resource_api.config import Settings, get_settings

LOG_FILE_NAME = "app.log"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


# Each entry maps one or more Python logger names to a Settings field.
# When setup_logging() runs, it sets the level of each listed logger
# to the value of the corresponding setting.

_CATEGORY_MAP: dict[str, list[str]] = {
    "log_level_sql": [
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "aiosqlite",
    ],
    "log_level_uvicorn": [
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
    ],
    "log_level_storage": [
        "resource_api.infrastructure.storage",
        "resource_api.application.services.backup_scheduler",
    ],
}


def setup_logging(settings: Settings | None = None) -> RotatingFileHandler | None:
    """Configure Python logging levels and handlers from application settings.

    Returns the file handler when ``log_file_path`` is set, so the caller can
    hand it to a ``LogCycler``. Calling it again replaces the previous file
    handler instead of stacking a second one.
    """
    settings = settings or get_settings()
    root_level = _parse_level(settings.log_level)

    root = logging.getLogger()
    root.setLevel(root_level)

    # Ensure at least one console handler exists (uvicorn usually adds one,
    # but when running tests or scripts it may not).
    if not any(_is_console_handler(h) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))
        root.addHandler(handler)

    file_handler = None
    for existing in [h for h in root.handlers if isinstance(h, RotatingFileHandler)]:
        root.removeHandler(existing)
        existing.close()
    if settings.log_file_path:
        file_handler = _build_file_handler(Path(settings.log_file_path), settings.log_backup_count)
        root.addHandler(file_handler)

    for settings_field, logger_names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, settings_field, "INFO"))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s, sql=%s, uvicorn=%s, storage=%s, file=%s",
        settings.log_level,
        settings.log_level_sql,
        settings.log_level_uvicorn,
        settings.log_level_storage,
        file_handler.baseFilename if file_handler else None,
    )
    return file_handler


def _build_file_handler(directory: Path, backup_count: int) -> RotatingFileHandler:
    directory.mkdir(parents=True, exist_ok=True)
    # maxBytes=0 disables size-triggered rollover; LogCycler decides when to rotate
    handler = RotatingFileHandler(
        directory / LOG_FILE_NAME,
        maxBytes=0,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _is_console_handler(handler: logging.Handler) -> bool:
    # FileHandler subclasses StreamHandler
    return isinstance(handler, logging.StreamHandler) and not isinstance(
        handler, logging.FileHandler
    )


def _parse_level(raw: str) -> int:
    """Convert a level name string to a logging constant, defaulting to INFO."""
    numeric = getattr(logging, raw.upper(), None)
    if isinstance(numeric, int):
        return numeric
    return logging.INFO

"""Logging setup for the API process.

The root level comes from LOG_LEVEL. Four noisy or interesting areas get
their own level so they can be turned up or down independently:

    LOG_LEVEL_SQL          SQLAlchemy / aiosqlite (local cache table)
    LOG_LEVEL_FIRESTORE    Firestore client, google-api-core retries, auth
    LOG_LEVEL_UVICORN      access and error logs
    LOG_LEVEL_DATA_ACCESS  record collections, subscriptions, in-memory store

Call ``setup_logging()`` once from the FastAPI lifespan.
"""

import logging
import sys

from scenario_manager.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s — %(message)s"

# Settings field -> loggers it controls
CATEGORY_LOGGERS: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"),
    "log_level_firestore": (
        "google.cloud.firestore_v1",
        "google.api_core",
        "google.auth",
        "scenario_manager.infrastructure.firestore",
    ),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_data_access": (
        "scenario_manager.application.services.record_collection",
        "scenario_manager.application.services.subscription",
        "scenario_manager.infrastructure.memory",
    ),
}


def setup_logging(settings: Settings | None = None) -> None:
    """Set the root level, install a stderr handler if none exists, apply category levels."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(level_for(settings.log_level))
    # uvicorn installs its own handlers; bare scripts and tests do not
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    levels = {field: getattr(settings, field) for field in CATEGORY_LOGGERS}
    for field, logger_names in CATEGORY_LOGGERS.items():
        for name in logger_names:
            logging.getLogger(name).setLevel(level_for(levels[field]))

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        " ".join(f"{field.removeprefix('log_level_')}={level}" for field, level in levels.items()),
    )


def level_for(name: str) -> int:
    """Logging constant for a level name; unknown names fall back to INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO

from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Scenario Manager API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Document store: "firestore" (hosted) or "memory" (process-local)
    document_store: str = "firestore"
    firestore_project_id: str = ""
    firestore_database: str = "(default)"
    firestore_credentials_file: str = ""

    # Pre-migration local cache (key/value table)
    local_cache_url: str = "sqlite:///data/local_cache.db"

    # Deleting a business/scenario also deletes its scenarios/comments
    cascade_deletes: bool = True

    # Seeded into an empty quickLabels collection, in this order
    default_quick_labels: list[str] = ["ザキ", "男", "女"]

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — local cache SQL
    log_level_firestore: str = "WARNING"     # google.cloud.firestore / google.api_core
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_data_access: str = "INFO"      # RecordCollection queries and fallbacks

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()

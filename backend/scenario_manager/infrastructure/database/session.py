"""SQLAlchemy engine and session configuration for the local cache database."""

from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from scenario_manager.config import get_settings


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def sqlite_directory(url: str) -> Path | None:
    """Directory a file-based SQLite URL writes into (None for other databases)."""
    if not url.startswith("sqlite") or ":memory:" in url:
        return None
    path = url.split(":///", 1)[-1]
    return Path(path).parent if path else None


settings = get_settings()
_async_url = _get_async_url(settings.local_cache_url)

engine = create_async_engine(
    _async_url,
    echo=False,
    future=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


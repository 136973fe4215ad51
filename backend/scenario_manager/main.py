"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scenario_manager.config import get_settings
from scenario_manager.application.interfaces import DocumentStore
from scenario_manager.application.services import MigrationService
from scenario_manager.domain.exceptions import StoreError
from scenario_manager.infrastructure.database import Base, engine
from scenario_manager.infrastructure.database.session import async_session_factory, sqlite_directory
from scenario_manager.infrastructure.database.repositories import SQLAlchemyLocalCache
from scenario_manager.infrastructure.dependencies import get_document_store
from scenario_manager.infrastructure.logging.log_config import setup_logging
from scenario_manager.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _migrate_local_cache(store: DocumentStore) -> None:
    """Copy any records left in the legacy local cache into the document store.

    Runs on every start; once the cache is empty it is a no-op. A failed
    migration keeps the cache and is retried on the next start.
    """
    try:
        async with async_session_factory() as session:
            result = await MigrationService(SQLAlchemyLocalCache(session), store).migrate()
            await session.commit()
    except Exception:
        logger.exception("Local cache migration crashed — continuing without it")
        return

    if result.skipped:
        logger.debug("No local cache to migrate")
    elif result.succeeded:
        logger.info("Migrated %d cached records: %s", result.total, result.migrated)
    else:
        logger.warning("Local cache migration failed, will retry on next start: %s", result.error)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — prepare the local cache, migrate it, close the store."""
    settings = get_settings()
    setup_logging()

    # 1. Ensure the SQLite directory exists and the cache table is created
    directory = sqlite_directory(settings.local_cache_url)
    if directory is not None:
        directory.mkdir(parents=True, exist_ok=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # 2. Move legacy cached records into the document store before serving reads
    store = get_document_store()
    await _migrate_local_cache(store)

    yield

    # Shutdown
    await store.close()
    await engine.dispose()


async def _store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("%s %s — %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": str(exc)},
    )


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store failures on create/update surface as 502
    app.add_exception_handler(StoreError, _store_error_handler)

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "scenario_manager.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )

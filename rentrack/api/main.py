"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rentrack.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from rentrack.api.middleware.error_handler import setup_exception_handlers
from rentrack.api.routes import (
    health_router,
    inventory_router,
    movements_router,
    reports_router,
)
from rentrack.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan handler.

    Migrates the database and opens the connection pool on startup, closes
    the pool on shutdown.
    """
    from rentrack.infrastructure.storage.sqlite import close_pool, get_pool
    from rentrack.infrastructure.storage.sqlite.migrations import run_migrations

    settings = get_settings()
    configure_logging()
    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        environment=settings.environment,
    )

    try:
        results = await run_migrations()
        if any(not r.success for r in results):
            raise RuntimeError("database migration failed")
        await get_pool()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise
    logger.info("database_ready", migrations_applied=len(results))

    if not settings.movement.base_return_location_id:
        logger.warning("base_return_location_unset")

    yield

    logger.info("application_stopping")
    await close_pool()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="RENTrack API",
        description="Rental inventory movements, locations and rental reports",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(movements_router)
    app.include_router(inventory_router)
    app.include_router(reports_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "rentrack.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )

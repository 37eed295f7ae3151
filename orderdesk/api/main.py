"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk import __version__
from orderdesk.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from orderdesk.api.middleware.error_handler import setup_exception_handlers
from orderdesk.api.routes import (
    health_router,
    inventory_router,
    ledger_router,
    orders_router,
)
from orderdesk.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run migrations and open the pool on startup; close it on shutdown."""
    settings = get_settings()
    configure_logging()

    logger.info(
        "application_starting",
        host=settings.api.host,
        port=settings.api.port,
        db_path=str(settings.storage.db_path),
    )

    from orderdesk.infrastructure.storage.sqlite import close_pool, get_pool
    from orderdesk.infrastructure.storage.sqlite.migrations import run_migrations

    try:
        results = await run_migrations()
        failed = [r for r in results if not r.success]
        if failed:
            raise RuntimeError(f"Migration v{failed[0].version} failed: {failed[0].error}")
        await get_pool()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise

    logger.info("application_started", migrations_applied=len(results))

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
        title=settings.app_name,
        description="Exchange and return reconciliation for sales and social-commerce orders",
        version=__version__,
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
    app.include_router(orders_router)
    app.include_router(inventory_router)
    app.include_router(ledger_router)

    # Root health endpoint (for container health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "orderdesk.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )

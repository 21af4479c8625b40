"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, uvicorn, restaurant_rag.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from restaurant_rag.api.deps.dependencies import get_service_cache
from restaurant_rag.observability.logger import configure_logging
from restaurant_rag.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

from .routers import (
    documents_router,
    health_router,
    search_router,
    stats_router,
    uploads_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the chunk store on startup and closes the store, the
    connection handle and the embedding client on shutdown.
    """
    cache = get_service_cache()
    configure_logging(cache.settings.log_level)
    logger = logging.getLogger(__name__)

    logger.info("Pre-warming service cache...")
    _ = cache.store
    logger.info(
        "Service cache pre-warmed",
        extra={"store_type": cache.settings.vector_store.store_type},
    )

    yield

    await cache.aclose()
    logger.info("Service cache closed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Restaurant Knowledge Base API",
        description="Multi-tenant hybrid search over restaurant documents and POS exports",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(stats_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(uploads_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "restaurant_rag.api.main:app",
        host="0.0.0.0",
        port=8000,
    )

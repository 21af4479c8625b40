"""API routers."""

from restaurant_rag.api.routers.documents import router as documents_router
from restaurant_rag.api.routers.documents import stats_router
from restaurant_rag.api.routers.health import router as health_router
from restaurant_rag.api.routers.search import router as search_router
from restaurant_rag.api.routers.uploads import router as uploads_router

__all__ = [
    "documents_router",
    "health_router",
    "search_router",
    "stats_router",
    "uploads_router",
]

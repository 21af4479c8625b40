"""FastAPI dependency providers."""

from restaurant_rag.api.deps.dependencies import (
    ServiceCache,
    get_csv_service,
    get_document_service,
    get_search_service,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_csv_service",
    "get_document_service",
    "get_search_service",
    "get_service_cache",
]

"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators
(connection handle, chunk store, embedding client) are built lazily by
ServiceCache and closed by the application lifespan.

Dependencies: restaurant_rag.configs, restaurant_rag.application, restaurant_rag.boundary
System role: DI container for service injection
"""

from fastapi import Depends

from restaurant_rag.application.embedder import EmbeddingBatcher
from restaurant_rag.application.services import (
    CsvIngestionService,
    DocumentService,
    SearchService,
)
from restaurant_rag.boundary.db.connection import DatabaseHandle
from restaurant_rag.boundary.embeddings.client import EmbeddingClient
from restaurant_rag.boundary.vdb import ChunkStore, create_chunk_store
from restaurant_rag.configs import Settings, get_settings
from restaurant_rag.core.retriever import Retriever


class ServiceCache:
    """Container for cached long-lived instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._database: DatabaseHandle | None = None
        self._store: ChunkStore | None = None
        self._embedding_client: EmbeddingClient | None = None
        self._embedder: EmbeddingBatcher | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def database(self) -> DatabaseHandle:
        """Get cached connection handle (connects on first query)."""
        if self._database is None:
            self._database = DatabaseHandle.from_settings(self.settings.database)
        return self._database

    @property
    def store(self) -> ChunkStore:
        """Get cached chunk store selected by VECTOR_STORE_STORE_TYPE."""
        if self._store is None:
            self._store = create_chunk_store(self.settings, self.database)
        return self._store

    @property
    def embedding_client(self) -> EmbeddingClient:
        if self._embedding_client is None:
            self._embedding_client = EmbeddingClient.from_settings(self.settings.embedding)
        return self._embedding_client

    @property
    def embedder(self) -> EmbeddingBatcher:
        """Get cached embedding batcher."""
        if self._embedder is None:
            config = self.settings.embedding
            self._embedder = EmbeddingBatcher(
                self.embedding_client,
                max_batch_size=config.max_batch_size,
                batch_delay_seconds=config.batch_delay_seconds,
                call_timeout_seconds=config.timeout_seconds * config.max_retries,
            )
        return self._embedder

    async def aclose(self) -> None:
        """Close network resources, then forget every instance."""
        if self._store is not None:
            await self._store.close()
        if self._embedding_client is not None:
            await self._embedding_client.aclose()
        if self._database is not None:
            await self._database.dispose()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._database = None
        self._store = None
        self._embedding_client = None
        self._embedder = None


_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_document_service(
    cache: ServiceCache = Depends(get_service_cache),
) -> DocumentService:
    """
    Get document service instance.

    Returns:
        DocumentService: Lifecycle service over the cached store and embedder
    """
    settings = cache.settings
    return DocumentService(
        store=cache.store,
        embedder=cache.embedder,
        tenants=settings.tenants,
        chunk_max_chars=settings.retrieval.chunk_max_chars,
        chunk_overlap_chars=settings.retrieval.chunk_overlap_chars,
        store_type=settings.vector_store.store_type,
    )


def get_search_service(
    cache: ServiceCache = Depends(get_service_cache),
) -> SearchService:
    """
    Get search service instance.

    Returns:
        SearchService: Hybrid search over the cached store
    """
    settings = cache.settings
    retriever = Retriever(
        cache.store,
        candidate_multiplier=settings.vector_store.candidate_multiplier,
        semantic_timeout_seconds=settings.retrieval.semantic_timeout_seconds,
        lexical_timeout_seconds=settings.retrieval.lexical_timeout_seconds,
    )
    return SearchService(
        embedder=cache.embedder,
        retriever=retriever,
        tenants=settings.tenants,
        rrf_k=settings.retrieval.rrf_k,
        default_limit=settings.retrieval.default_limit,
        max_limit=settings.retrieval.max_limit,
        fanout_multiplier=settings.retrieval.fanout_multiplier,
        min_fanout=settings.retrieval.min_fanout,
    )


def get_csv_service(
    cache: ServiceCache = Depends(get_service_cache),
    document_service: DocumentService = Depends(get_document_service),
) -> CsvIngestionService:
    """
    Get CSV ingestion service instance.

    Returns:
        CsvIngestionService: Row-per-chunk ingestion built on the document service
    """
    settings = cache.settings
    return CsvIngestionService(
        documents=document_service,
        tenants=settings.tenants,
        max_bytes=settings.ingestion.max_csv_bytes,
        currency_label=settings.ingestion.currency_label,
    )

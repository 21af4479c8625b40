"""
Chunk store factory for selecting between the in-memory (dev) and PostgreSQL (prod) stores.

Depends on VECTOR_STORE_STORE_TYPE.

Dependencies: restaurant_rag.boundary.vdb, restaurant_rag.configs
System role: Chunk store instantiation and selection
"""

import logging

from restaurant_rag.boundary.db.connection import DatabaseHandle
from restaurant_rag.boundary.db.models import EMBEDDING_DIMENSION
from restaurant_rag.boundary.vdb.chunk_store import ChunkStore
from restaurant_rag.boundary.vdb.memory_store import InMemoryChunkStore
from restaurant_rag.boundary.vdb.postgres_store import PostgresChunkStore
from restaurant_rag.configs import Settings
from restaurant_rag.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def create_chunk_store(settings: Settings, database: DatabaseHandle | None = None) -> ChunkStore:
    """
    Build the configured chunk store.

    Args:
        settings: Application settings
        database: Connection handle for the PostgreSQL store (built from settings if None)

    Returns:
        ChunkStore: InMemoryChunkStore or PostgresChunkStore

    Raises:
        ConfigurationError: If the store type is unknown or the embedding
            dimension does not match the vector column
    """
    store_type = settings.vector_store.store_type.lower()

    if store_type == "memory":
        logger.info(f"{__name__}:create_chunk_store - Creating in-memory store (local dev mode)")
        return InMemoryChunkStore(fuzzy_max_edits=settings.vector_store.fuzzy_max_edits)

    if store_type == "postgres":
        if settings.embedding.dimension != EMBEDDING_DIMENSION:
            raise ConfigurationError(
                f"Embedding dimension {settings.embedding.dimension} does not match "
                f"the vector column ({EMBEDDING_DIMENSION})",
                setting="EMBEDDING_DIMENSION",
            )
        logger.info(f"{__name__}:create_chunk_store - Creating PostgreSQL store (production mode)")
        return PostgresChunkStore(
            database or DatabaseHandle.from_settings(settings.database),
            text_search_config=settings.vector_store.text_search_config,
            trigram_threshold=settings.vector_store.trigram_threshold,
            fuzzy_max_edits=settings.vector_store.fuzzy_max_edits,
            owns_database=database is None,
        )

    raise ConfigurationError(
        f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
        "Must be 'memory' (dev) or 'postgres' (production).",
        setting="VECTOR_STORE_STORE_TYPE",
    )

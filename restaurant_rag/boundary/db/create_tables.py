"""
Database schema and search index creation.

Creates the ORM tables and, on PostgreSQL, the extensions and indexes the
hybrid search relies on: pgvector HNSW (cosine), a GIN full-text index and
a GIN trigram index. Every statement is idempotent.

Dependencies: sqlalchemy, restaurant_rag.boundary.db
System role: Database schema initialization ("index build" step)

Usage:
    python -m restaurant_rag.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy import text

from restaurant_rag.boundary.db.base import Base
from restaurant_rag.boundary.db.connection import DatabaseHandle
from restaurant_rag.boundary.db.models import ChunkModel, DocumentModel  # noqa: F401
from restaurant_rag.configs import get_settings
from restaurant_rag.observability.logger import configure_logging

logger = logging.getLogger(__name__)

EXTENSION_STATEMENTS = (
    "CREATE EXTENSION IF NOT EXISTS vector",
    "CREATE EXTENSION IF NOT EXISTS pg_trgm",
    "CREATE EXTENSION IF NOT EXISTS fuzzystrmatch",
)


def search_index_statements(text_search_config: str = "english") -> tuple[str, ...]:
    """DDL for the semantic and lexical indexes over the chunks table."""
    return (
        "CREATE INDEX IF NOT EXISTS chunks_embedding_hnsw "
        "ON chunks USING hnsw (embedding vector_cosine_ops)",
        "CREATE INDEX IF NOT EXISTS chunks_content_fts "
        f"ON chunks USING gin (to_tsvector('{text_search_config}'::regconfig, content))",
        "CREATE INDEX IF NOT EXISTS chunks_content_trgm "
        "ON chunks USING gin (content gin_trgm_ops)",
    )


async def create_all_tables(database: DatabaseHandle) -> None:
    """
    Create all tables registered on Base.metadata.

    On PostgreSQL the pgvector extension is created first so the vector
    column type exists.

    Raises:
        SQLAlchemyError: If connection or DDL fails
    """
    engine = await database.engine()
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text(EXTENSION_STATEMENTS[0]))
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - Tables created")


async def create_search_indexes(
    database: DatabaseHandle,
    text_search_config: str = "english",
) -> None:
    """
    Create extensions and search indexes (PostgreSQL only; no-op elsewhere).

    Until this has run, lexical search reports the index as unavailable
    and the retriever degrades to semantic-only results.
    """
    engine = await database.engine()
    if engine.dialect.name != "postgresql":
        logger.info(f"{__name__}:create_search_indexes - Skipped for {engine.dialect.name}")
        return
    async with engine.begin() as conn:
        for statement in EXTENSION_STATEMENTS + search_index_statements(text_search_config):
            await conn.execute(text(statement))
    logger.info(f"{__name__}:create_search_indexes - Search indexes created")


async def drop_all_tables(database: DatabaseHandle) -> None:
    """
    Drop all tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = await database.engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info(f"{__name__}:drop_all_tables - Tables dropped")


async def _main() -> None:
    settings = get_settings()
    database = DatabaseHandle.from_settings(settings.database)
    try:
        await create_all_tables(database)
        await create_search_indexes(database, settings.vector_store.text_search_config)
    finally:
        await database.dispose()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(_main())

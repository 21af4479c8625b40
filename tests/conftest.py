"""
Shared test fixtures and configuration for entire test suite.

Provides: deterministic embedding provider, in-memory store and services,
SQLite-backed database handle
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
import math
import re
from collections.abc import Sequence

import pytest
from sqlalchemy.pool import StaticPool

from restaurant_rag.application.embedder import EmbeddingBatcher
from restaurant_rag.application.services import (
    CsvIngestionService,
    DocumentService,
    SearchService,
)
from restaurant_rag.boundary.db.connection import DatabaseHandle
from restaurant_rag.boundary.db.create_tables import create_all_tables, drop_all_tables
from restaurant_rag.boundary.db.models import EMBEDDING_DIMENSION
from restaurant_rag.boundary.vdb import InMemoryChunkStore
from restaurant_rag.configs.tenants import TenantSettings
from restaurant_rag.core.retriever import Retriever

_WORD = re.compile(r"\w+")


class HashingEmbeddingProvider:
    """
    Deterministic bag-of-words embedder.

    Each lower-cased token is hashed onto one dimension, so texts sharing
    words have positive cosine similarity and unrelated texts are near 0.
    """

    def __init__(self, dimension: int = EMBEDDING_DIMENSION) -> None:
        self.dimension = dimension
        self.calls: list[list[str]] = []
        self.configured = True

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self.vector(text) for text in texts]

    def vector(self, text: str) -> list[float]:
        values = [0.0] * self.dimension
        for token in _WORD.findall(text.lower()):
            digest = hashlib.sha256(token.encode()).digest()
            values[int.from_bytes(digest[:4], "big") % self.dimension] += 1.0
        norm = math.sqrt(sum(v * v for v in values))
        if norm == 0:
            values[0] = 1.0
            return values
        return [v / norm for v in values]


@pytest.fixture
def tenants() -> TenantSettings:
    """Default tenant registry (fika, harveys_wings, ...)."""
    return TenantSettings()


@pytest.fixture
def provider() -> HashingEmbeddingProvider:
    return HashingEmbeddingProvider()


@pytest.fixture
def embedder(provider: HashingEmbeddingProvider) -> EmbeddingBatcher:
    return EmbeddingBatcher(provider, max_batch_size=100, batch_delay_seconds=0)


@pytest.fixture
def memory_store() -> InMemoryChunkStore:
    return InMemoryChunkStore()


@pytest.fixture
def document_service(
    memory_store: InMemoryChunkStore,
    embedder: EmbeddingBatcher,
    tenants: TenantSettings,
) -> DocumentService:
    return DocumentService(
        store=memory_store,
        embedder=embedder,
        tenants=tenants,
        chunk_max_chars=1000,
        chunk_overlap_chars=200,
        store_type="memory",
    )


@pytest.fixture
def search_service(
    memory_store: InMemoryChunkStore,
    embedder: EmbeddingBatcher,
    tenants: TenantSettings,
) -> SearchService:
    return SearchService(
        embedder=embedder,
        retriever=Retriever(memory_store),
        tenants=tenants,
    )


@pytest.fixture
def csv_service(document_service: DocumentService, tenants: TenantSettings) -> CsvIngestionService:
    return CsvIngestionService(documents=document_service, tenants=tenants)


@pytest.fixture
async def sqlite_database():
    """
    In-memory SQLite database with all tables created.

    Yields:
        DatabaseHandle: Handle disposed after the test
    """
    database = DatabaseHandle(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all_tables(database)
    yield database
    await drop_all_tables(database)
    await database.dispose()

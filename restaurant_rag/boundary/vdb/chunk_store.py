"""
Tenant-scoped chunk store interface.

The narrow surface through which ingestion, retrieval and lifecycle code
reads and writes documents and chunks. Every method except ``stats`` takes
a tenant id; ``stats`` takes an explicit TenantScope.

Dependencies: restaurant_rag.models
System role: Store adapter contract shared by the PostgreSQL and in-memory stores
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable
from uuid import UUID

from restaurant_rag.models.chunk import NewChunk, RetrievedChunk
from restaurant_rag.models.common import TenantScope
from restaurant_rag.models.document import (
    DeleteResult,
    DocumentRecord,
    DocumentSource,
    DocumentSummary,
    DocumentType,
    KnowledgeBaseStats,
)

SEMANTIC_INDEX = "chunks_embedding_hnsw"
LEXICAL_INDEX = "chunks_content_fts"


@runtime_checkable
class ChunkStore(Protocol):
    """Async chunk/document persistence and search."""

    async def save_document(
        self,
        document: DocumentRecord,
        chunks: Sequence[NewChunk],
    ) -> None:
        """Write the document and all its chunks atomically."""
        ...

    async def list_documents(self, tenant_id: str) -> list[DocumentSummary]:
        ...

    async def find_documents_by_title(
        self,
        tenant_id: str,
        title: str,
        source: DocumentSource | None = None,
    ) -> list[UUID]:
        ...

    async def delete_document(self, tenant_id: str, document_id: UUID) -> DeleteResult:
        ...

    async def count_chunks(self, tenant_id: str, document_id: UUID) -> int:
        ...

    async def semantic_search(
        self,
        tenant_id: str,
        vector: Sequence[float],
        limit: int,
        candidates: int,
        document_type: DocumentType | None = None,
    ) -> list[RetrievedChunk]:
        ...

    async def lexical_search(
        self,
        tenant_id: str,
        query_text: str,
        limit: int,
        document_type: DocumentType | None = None,
    ) -> list[RetrievedChunk]:
        ...

    async def stats(self, scope: TenantScope) -> KnowledgeBaseStats:
        ...

    async def close(self) -> None:
        ...


def empty_stats(scope: TenantScope) -> KnowledgeBaseStats:
    """Zeroed stats for a scope; every document type present with count 0."""
    return KnowledgeBaseStats(tenant_id=None if scope.include_all else scope.tenant_id)

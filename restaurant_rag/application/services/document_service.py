"""
Document service orchestrator.

Owns the document lifecycle for a tenant: ingest (chunk, embed, write),
list, delete and stats. Ingest embeds every chunk before anything is
written and then stores the document with all its chunks in one atomic
write, so a failure at either stage leaves no document behind.

Dependencies: restaurant_rag.application.embedder, restaurant_rag.boundary.vdb, restaurant_rag.core
System role: Document lifecycle management
"""

import logging
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from uuid import UUID

from restaurant_rag.application.embedder import EmbeddingBatcher
from restaurant_rag.application.services.validation import parse_document_type, validate_tenant
from restaurant_rag.boundary.vdb.chunk_store import ChunkStore
from restaurant_rag.configs.tenants import TenantSettings
from restaurant_rag.core.chunker import chunk_text, section_labels
from restaurant_rag.core.exceptions import (
    ConfigurationError,
    EmbeddingProviderError,
    StoreError,
    ValidationError,
)
from restaurant_rag.models.chunk import ChunkMetadata, NewChunk
from restaurant_rag.models.common import TenantScope
from restaurant_rag.models.document import (
    DeleteResult,
    DocumentRecord,
    DocumentSource,
    DocumentSummary,
    DocumentType,
    IngestResult,
    KnowledgeBaseStats,
    StatusResponse,
)

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document lifecycle orchestrator.

    A document is either absent or present; edits are a delete followed by
    a fresh ingest, which issues a new document id.
    """

    def __init__(
        self,
        store: ChunkStore,
        embedder: EmbeddingBatcher,
        tenants: TenantSettings,
        chunk_max_chars: int = 1000,
        chunk_overlap_chars: int = 200,
        store_type: str = "postgres",
    ) -> None:
        """
        Initialize document service.

        Args:
            store: Tenant-scoped chunk store
            embedder: Embedding batcher used for chunk vectors
            tenants: Tenant registry
            chunk_max_chars: Chunk size bound
            chunk_overlap_chars: Overlap carried between chunks
            store_type: Store backend name reported by status()
        """
        self.store = store
        self.embedder = embedder
        self.tenants = tenants
        self.chunk_max_chars = chunk_max_chars
        self.chunk_overlap_chars = chunk_overlap_chars
        self.store_type = store_type

    async def ingest(
        self,
        tenant_id: str,
        content: str,
        title: str,
        document_type: str | DocumentType = DocumentType.OTHER,
        tags: Sequence[str] | None = None,
        chunk_max_chars: int | None = None,
        chunk_overlap_chars: int | None = None,
    ) -> IngestResult:
        """
        Chunk, embed and store a document.

        Steps:
        1. Validate tenant, title, type and content
        2. Chunk the text and label sections
        3. Embed all chunks (nothing written yet)
        4. Write the document and its chunks atomically

        Args:
            tenant_id: Owning tenant
            content: Full document text
            title: Document title
            document_type: menu, recipe, sop, policy, manual or other
            tags: Optional labels copied onto every chunk
            chunk_max_chars: Override of the configured chunk size
            chunk_overlap_chars: Override of the configured overlap

        Returns:
            IngestResult: New document id, title and chunk count

        Raises:
            ValidationError: Bad tenant, title, type or empty content
            EmbeddingProviderError: details["stage"] == "embedding"
            StoreError: details["stage"] == "storage"
        """
        validate_tenant(self.tenants, tenant_id)
        doc_type = parse_document_type(document_type)
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title must not be empty", field="title")
        if not content or not content.strip():
            raise ValidationError("Document content must not be empty", field="content")
        tags = [tag.strip() for tag in (tags or []) if tag and tag.strip()]

        chunks = chunk_text(
            content,
            chunk_max_chars or self.chunk_max_chars,
            self.chunk_overlap_chars if chunk_overlap_chars is None else chunk_overlap_chars,
        )
        sections = section_labels(chunks)
        passages = [
            (
                chunk.content,
                ChunkMetadata(type=doc_type.value, title=title, section=section, tags=tags),
            )
            for chunk, section in zip(chunks, sections)
        ]
        return await self.store_passages(
            tenant_id=tenant_id,
            title=title,
            document_type=doc_type,
            content=content,
            tags=tags,
            source=DocumentSource.TEXT,
            passages=passages,
        )

    async def store_passages(
        self,
        tenant_id: str,
        title: str,
        document_type: DocumentType,
        content: str,
        tags: list[str],
        source: DocumentSource,
        passages: Sequence[tuple[str, ChunkMetadata]],
    ) -> IngestResult:
        """
        Embed ready-made passages and store them as one document.

        Used by ``ingest`` after chunking and by CSV ingestion, where each
        row is already one passage. Positions follow the passage order.

        Raises:
            EmbeddingProviderError: details["stage"] == "embedding"
            StoreError: details["stage"] == "storage"
        """
        document_id = uuid.uuid4()
        logger.info(
            f"{__name__}:store_passages - Ingesting document",
            extra={"tenant_id": tenant_id, "document_id": str(document_id), "passages": len(passages)},
        )

        try:
            vectors = await self.embedder.embed([text for text, _ in passages])
        except (EmbeddingProviderError, ConfigurationError) as e:
            logger.error(
                f"{__name__}:store_passages - Embedding failed, nothing written",
                extra={"tenant_id": tenant_id, "document_id": str(document_id), "error": str(e)},
            )
            raise e.at_stage("embedding")

        chunks = [
            NewChunk(content=text, position=position, embedding=vector, metadata=metadata)
            for position, ((text, metadata), vector) in enumerate(zip(passages, vectors))
        ]
        document = DocumentRecord(
            id=document_id,
            tenant_id=tenant_id,
            title=title,
            document_type=document_type,
            content=content,
            chunk_count=len(chunks),
            tags=tags,
            source=source,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self.store.save_document(document, chunks)
        except StoreError as e:
            logger.error(
                f"{__name__}:store_passages - Storage failed, transaction rolled back",
                extra={"tenant_id": tenant_id, "document_id": str(document_id), "error": str(e)},
            )
            raise e.at_stage("storage")

        logger.info(
            f"{__name__}:store_passages - Document stored",
            extra={"tenant_id": tenant_id, "document_id": str(document_id), "chunk_count": len(chunks)},
        )
        return IngestResult(document_id=document_id, title=title, chunk_count=len(chunks))

    async def list_documents(self, tenant_id: str) -> list[DocumentSummary]:
        """List a tenant's documents, most recent first."""
        validate_tenant(self.tenants, tenant_id)
        return await self.store.list_documents(tenant_id)

    async def delete_document(self, tenant_id: str, document_id: UUID) -> DeleteResult:
        """
        Delete a document and its chunks.

        Returns:
            DeleteResult: chunks removed and whether the document existed;
            (0, False) for an unknown id rather than an error
        """
        validate_tenant(self.tenants, tenant_id)
        result = await self.store.delete_document(tenant_id, document_id)
        logger.info(
            f"{__name__}:delete_document - Delete finished",
            extra={
                "tenant_id": tenant_id,
                "document_id": str(document_id),
                "chunks_deleted": result.chunks_deleted,
                "document_deleted": result.document_deleted,
            },
        )
        return result

    async def count_chunks(self, tenant_id: str, document_id: UUID) -> int:
        validate_tenant(self.tenants, tenant_id)
        return await self.store.count_chunks(tenant_id, document_id)

    async def stats(
        self,
        tenant_id: str | None = None,
        all_tenants: bool = False,
    ) -> KnowledgeBaseStats:
        """
        Document and chunk counts for one tenant or, explicitly, all tenants.

        Raises:
            ValidationError: If neither or both of tenant_id / all_tenants are given
        """
        if all_tenants:
            if tenant_id is not None:
                raise ValidationError(
                    "Pass either tenant_id or all_tenants, not both", field="all_tenants"
                )
            scope = TenantScope.all_tenants()
        elif tenant_id is None:
            raise ValidationError(
                "tenant_id is required unless all_tenants is requested", field="tenant_id"
            )
        else:
            scope = TenantScope.single(validate_tenant(self.tenants, tenant_id))
        return await self.store.stats(scope)

    async def status(self, tenant_id: str | None = None) -> StatusResponse:
        """Configuration readiness plus stats (all tenants when tenant_id is None)."""
        embedding_configured = self.embedder.configured
        stats = await self.stats(tenant_id=tenant_id, all_tenants=tenant_id is None)
        return StatusResponse(
            configured=embedding_configured,
            embedding_configured=embedding_configured,
            store_type=self.store_type,
            stats=stats,
        )

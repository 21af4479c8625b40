"""
Chunk CRUD operations.

Bulk insert, tenant-scoped delete and count over ChunkModel.

Dependencies: sqlalchemy, restaurant_rag.boundary.db.models
System role: Chunk persistence operations
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_rag.boundary.db.CRUD.base_crud import BaseCRUD
from restaurant_rag.boundary.db.models.chunk_model import ChunkModel
from restaurant_rag.models.chunk import NewChunk
from restaurant_rag.models.common import TenantScope


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel."""

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def bulk_create(
        self,
        session: AsyncSession,
        tenant_id: str,
        document_id: UUID,
        chunks: Iterable[NewChunk],
    ) -> int:
        """
        Insert all chunks of one document in a single statement.

        Returns:
            Number of rows inserted
        """
        rows = [
            {
                "tenant_id": tenant_id,
                "document_id": document_id,
                "content": chunk.content,
                "embedding": chunk.embedding,
                "position": chunk.position,
                "chunk_metadata": chunk.metadata.model_dump(mode="json"),
            }
            for chunk in chunks
        ]
        if not rows:
            return 0
        await session.execute(insert(ChunkModel), rows)
        return len(rows)

    async def delete_by_document(
        self,
        session: AsyncSession,
        tenant_id: str,
        document_id: UUID,
    ) -> int:
        """Delete every chunk of (tenant, document); returns the row count."""
        stmt = delete(ChunkModel).where(
            ChunkModel.tenant_id == tenant_id,
            ChunkModel.document_id == document_id,
        )
        result = await session.execute(stmt)
        return result.rowcount or 0

    async def count_by_document(
        self,
        session: AsyncSession,
        tenant_id: str,
        document_id: UUID,
    ) -> int:
        stmt = select(func.count(ChunkModel.id)).where(
            ChunkModel.tenant_id == tenant_id,
            ChunkModel.document_id == document_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def count(self, session: AsyncSession, scope: TenantScope) -> int:
        """Total chunks in scope."""
        stmt = select(func.count(ChunkModel.id))
        if not scope.include_all:
            stmt = stmt.where(ChunkModel.tenant_id == scope.tenant_id)
        result = await session.execute(stmt)
        return result.scalar_one()


chunk_crud = ChunkCRUD()

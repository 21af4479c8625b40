"""
Document CRUD operations.

Tenant-scoped queries over DocumentModel: listing, title lookup, delete and
per-type counts.

Dependencies: sqlalchemy, restaurant_rag.boundary.db.models
System role: Document persistence operations
"""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_rag.boundary.db.CRUD.base_crud import BaseCRUD
from restaurant_rag.boundary.db.models.document_model import DocumentModel
from restaurant_rag.models.common import TenantScope
from restaurant_rag.models.document import DocumentSource


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def list_by_tenant(
        self,
        session: AsyncSession,
        tenant_id: str,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve a tenant's documents, newest first.

        Args:
            session: Async database session
            tenant_id: Owning tenant

        Returns:
            Sequence of DocumentModels ordered by created_at descending
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.tenant_id == tenant_id)
            .order_by(DocumentModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def find_ids_by_title(
        self,
        session: AsyncSession,
        tenant_id: str,
        title: str,
        source: DocumentSource | None = None,
    ) -> list[UUID]:
        """Ids of a tenant's documents with an exact title, optionally of one source."""
        stmt = select(DocumentModel.id).where(
            DocumentModel.tenant_id == tenant_id,
            DocumentModel.title == title,
        )
        if source is not None:
            stmt = stmt.where(DocumentModel.source == source)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_tenant(
        self,
        session: AsyncSession,
        tenant_id: str,
        id: UUID,
    ) -> bool:
        """
        Delete one document of a tenant.

        Returns:
            True if a row was deleted, False if none matched
        """
        stmt = delete(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.tenant_id == tenant_id,
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def count_by_type(
        self,
        session: AsyncSession,
        scope: TenantScope,
    ) -> dict[str, int]:
        """
        Count documents per type.

        Args:
            session: Async database session
            scope: One tenant, or the explicit all-tenants scope

        Returns:
            Mapping of document type value to count (types with no rows omitted)
        """
        stmt = select(DocumentModel.doc_type, func.count(DocumentModel.id)).group_by(
            DocumentModel.doc_type
        )
        if not scope.include_all:
            stmt = stmt.where(DocumentModel.tenant_id == scope.tenant_id)
        result = await session.execute(stmt)
        return {doc_type.value: count for doc_type, count in result.all()}


document_crud = DocumentCRUD()

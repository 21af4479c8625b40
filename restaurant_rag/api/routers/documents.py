"""
Document API endpoints.

Routes:
- POST /tenants/{tenant_id}/documents - Ingest a document
- GET /tenants/{tenant_id}/documents - List documents, newest first
- DELETE /tenants/{tenant_id}/documents/{document_id} - Delete a document and its chunks
- GET /stats - Counts for one tenant, or all tenants with all_tenants=true

Dependencies: restaurant_rag.application.services, restaurant_rag.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from restaurant_rag.api.deps import get_document_service
from restaurant_rag.api.routers.error_handling import handle_service_errors
from restaurant_rag.application.services import DocumentService
from restaurant_rag.models.document import (
    DeleteResult,
    DocumentListResponse,
    IngestRequest,
    IngestResult,
    KnowledgeBaseStats,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["documents"])
stats_router = APIRouter(prefix="/stats", tags=["documents"])


@router.post(
    "/{tenant_id}/documents",
    response_model=IngestResult,
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def ingest_document(
    tenant_id: str,
    request: IngestRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> IngestResult:
    """
    Chunk, embed and store a document for a tenant.

    Raises:
        HTTPException(400): Unknown tenant/type or empty content
        HTTPException(502): Embedding provider failure (nothing stored)
        HTTPException(500): Store failure (nothing stored)
    """
    logger.info(
        "Document ingest request",
        extra={"tenant_id": tenant_id, "title": request.title, "document_type": request.document_type},
    )
    return await document_service.ingest(
        tenant_id=tenant_id,
        content=request.content,
        title=request.title,
        document_type=request.document_type,
        tags=request.tags,
    )


@router.get("/{tenant_id}/documents", response_model=DocumentListResponse)
@handle_service_errors
async def list_documents(
    tenant_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List a tenant's documents, most recent first."""
    documents = await document_service.list_documents(tenant_id)
    return DocumentListResponse(documents=documents, total=len(documents))


@router.delete("/{tenant_id}/documents/{document_id}", response_model=DeleteResult)
@handle_service_errors
async def delete_document(
    tenant_id: str,
    document_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> DeleteResult:
    """
    Delete a document and all its chunks.

    Deleting an unknown document is not an error; the result reports
    zero chunks and document_deleted=false.
    """
    return await document_service.delete_document(tenant_id, document_id)


@stats_router.get("", response_model=KnowledgeBaseStats)
@handle_service_errors
async def get_stats(
    tenant_id: str | None = Query(default=None),
    all_tenants: bool = Query(default=False),
    document_service: DocumentService = Depends(get_document_service),
) -> KnowledgeBaseStats:
    """Document and chunk counts; all tenants only with all_tenants=true."""
    return await document_service.stats(tenant_id=tenant_id, all_tenants=all_tenants)

"""
Search API endpoint.

Routes: POST /tenants/{tenant_id}/search

Dependencies: restaurant_rag.application.services
System role: Hybrid search HTTP API
"""

from fastapi import APIRouter, Depends

from restaurant_rag.api.deps import get_search_service
from restaurant_rag.api.routers.error_handling import handle_service_errors
from restaurant_rag.application.services import SearchService
from restaurant_rag.models.search import SearchHitResponse, SearchRequest, SearchResponse

router = APIRouter(prefix="/tenants", tags=["search"])


@router.post("/{tenant_id}/search", response_model=SearchResponse)
@handle_service_errors
async def search(
    tenant_id: str,
    request: SearchRequest,
    search_service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Hybrid semantic + keyword search within one tenant."""
    hits = await search_service.search(
        tenant_id,
        request.query,
        limit=request.limit,
        document_type=request.document_type,
    )
    return SearchResponse(
        tenant_id=tenant_id,
        query=request.query,
        results=[
            SearchHitResponse(
                chunk_id=hit.chunk.id,
                document_id=hit.chunk.document_id,
                content=hit.chunk.content,
                position=hit.chunk.position,
                metadata=hit.chunk.metadata,
                score=hit.score,
                source=hit.source,
            )
            for hit in hits
        ],
    )

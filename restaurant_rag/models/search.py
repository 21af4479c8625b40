"""
Search request/response schemas.

Dependencies: pydantic
System role: Hybrid search API contracts
"""

import uuid

from pydantic import BaseModel, Field

from restaurant_rag.models.chunk import ChunkMetadata, HitSource


class SearchRequest(BaseModel):
    """Request schema for a hybrid query."""

    query: str = Field(min_length=1)
    limit: int | None = Field(default=None, ge=1)
    document_type: str | None = None


class SearchHitResponse(BaseModel):
    """One fused hit as returned to clients."""

    chunk_id: uuid.UUID
    document_id: uuid.UUID
    content: str
    position: int
    metadata: ChunkMetadata
    score: float
    source: HitSource


class SearchResponse(BaseModel):
    tenant_id: str
    query: str
    results: list[SearchHitResponse]

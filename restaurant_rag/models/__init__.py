"""Pydantic domain values and API schemas."""

from restaurant_rag.models.chunk import (
    ChunkMetadata,
    ChunkRecord,
    HitSource,
    NewChunk,
    RankedHit,
    RetrievedChunk,
    TextChunk,
)
from restaurant_rag.models.common import TenantScope
from restaurant_rag.models.document import (
    DeleteResult,
    DocumentRecord,
    DocumentSource,
    DocumentSummary,
    DocumentType,
    IngestResult,
    KnowledgeBaseStats,
)

__all__ = [
    "ChunkMetadata",
    "ChunkRecord",
    "DeleteResult",
    "DocumentRecord",
    "DocumentSource",
    "DocumentSummary",
    "DocumentType",
    "HitSource",
    "IngestResult",
    "KnowledgeBaseStats",
    "NewChunk",
    "RankedHit",
    "RetrievedChunk",
    "TenantScope",
    "TextChunk",
]

"""
Chunk domain models.

Represents chunker output, stored chunks, and the per-branch and fused
search hits built from them.

Dependencies: pydantic
System role: Chunk and search hit data structures
"""

import enum
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TextChunk(BaseModel):
    """One passage emitted by the chunker."""

    model_config = ConfigDict(frozen=True)

    content: str
    index: int
    # Offset in content where text not carried over from the previous chunk begins
    new_content_start: int = 0


class ChunkMetadata(BaseModel):
    """Metadata copied from the parent document at ingestion time."""

    type: str
    title: str
    section: str | None = None
    tags: list[str] = Field(default_factory=list)
    attributes: dict[str, Any] = Field(default_factory=dict)


class NewChunk(BaseModel):
    """A chunk ready to be written, embedding included."""

    content: str
    position: int
    embedding: list[float]
    metadata: ChunkMetadata


class ChunkRecord(BaseModel):
    """A stored chunk as returned by reads (embedding not loaded)."""

    id: uuid.UUID
    tenant_id: str
    document_id: uuid.UUID
    content: str
    position: int
    metadata: ChunkMetadata
    created_at: datetime


class HitSource(str, enum.Enum):
    """Which search branch produced a fused hit."""

    SEMANTIC = "semantic"
    LEXICAL = "lexical"
    BOTH = "both"


class RetrievedChunk(BaseModel):
    """A chunk at a 1-based rank within one search branch."""

    chunk: ChunkRecord
    rank: int = Field(ge=1)
    score: float


class RankedHit(BaseModel):
    """A chunk with its fused score and provenance."""

    chunk: ChunkRecord
    score: float
    source: HitSource
    semantic_rank: int | None = None
    lexical_rank: int | None = None

    @property
    def document_id(self) -> uuid.UUID:
        return self.chunk.document_id

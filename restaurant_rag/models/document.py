"""
Document domain models and schemas.

Value objects for whole documents plus the request/response schemas of the
document lifecycle operations.

Dependencies: pydantic
System role: Document API contracts
"""

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentType(str, enum.Enum):
    """Kinds of operational document a restaurant stores."""

    MENU = "menu"
    RECIPE = "recipe"
    SOP = "sop"
    POLICY = "policy"
    MANUAL = "manual"
    OTHER = "other"


class DocumentSource(str, enum.Enum):
    """How the document entered the knowledge base."""

    TEXT = "text"
    CSV = "csv"


class DocumentRecord(BaseModel):
    """A whole ingested document as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    tenant_id: str
    title: str
    document_type: DocumentType
    content: str
    chunk_count: int
    tags: list[str] = Field(default_factory=list)
    source: DocumentSource = DocumentSource.TEXT
    created_at: datetime


class DocumentSummary(BaseModel):
    """Document listing entry (content omitted)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    document_type: DocumentType
    chunk_count: int
    tags: list[str] = Field(default_factory=list)
    source: DocumentSource = DocumentSource.TEXT
    created_at: datetime


class IngestRequest(BaseModel):
    """Request schema for ingesting a free-form document."""

    title: str = Field(min_length=1, max_length=255)
    content: str
    document_type: str = Field(default=DocumentType.OTHER.value)
    tags: list[str] = Field(default_factory=list)


class IngestResult(BaseModel):
    """Outcome of a successful ingest."""

    document_id: uuid.UUID
    title: str
    chunk_count: int


class DeleteResult(BaseModel):
    """Outcome of a delete; zero/False when the document did not exist."""

    chunks_deleted: int = 0
    document_deleted: bool = False


class DocumentListResponse(BaseModel):
    """Document list response, newest first."""

    documents: list[DocumentSummary]
    total: int


class KnowledgeBaseStats(BaseModel):
    """Aggregate counts for one tenant or, when tenant_id is None, all tenants."""

    tenant_id: str | None = None
    total_documents: int = 0
    total_chunks: int = 0
    documents_by_type: dict[str, int] = Field(
        default_factory=lambda: {doc_type.value: 0 for doc_type in DocumentType}
    )


class StatusResponse(BaseModel):
    """Configuration readiness plus stats."""

    configured: bool
    embedding_configured: bool
    store_type: str
    stats: KnowledgeBaseStats | None = None

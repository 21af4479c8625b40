"""
Chunk ORM model.

Stores one retrievable passage with its embedding. The vector column uses
pgvector; search indexes (HNSW, full-text GIN, trigram GIN) are created by
``create_search_indexes`` rather than declared here so the metadata also
builds on SQLite.

Dependencies: sqlalchemy, pgvector, restaurant_rag.boundary.db.base
System role: Chunk persistence and search surface
"""

import uuid
from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restaurant_rag.boundary.db.base import Base, CreatedAtMixin, UUIDMixin

EMBEDDING_DIMENSION = 1536


class ChunkModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Chunk ORM model.

    Attributes:
        id: Store-assigned UUID
        tenant_id: Owning restaurant (always equal to the parent's)
        document_id: Parent document (ON DELETE CASCADE)
        content: Passage text
        embedding: Fixed-dimension vector
        position: 0-based index within the parent document
        chunk_metadata: type, title, section, tags, attributes (column "metadata")
    """

    __tablename__ = "chunks"
    __table_args__ = (
        Index("ix_chunks_tenant_document", "tenant_id", "document_id"),
    )

    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[Any] = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    chunk_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=dict,
    )

    document = relationship("DocumentModel", back_populates="chunks")

"""
Document ORM model.

Represents a whole ingested document. Its chunks live in the chunks table
and are removed with it (ON DELETE CASCADE).

Dependencies: sqlalchemy, restaurant_rag.boundary.db.base
System role: Document persistence
"""

from sqlalchemy import JSON, Enum, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restaurant_rag.boundary.db.base import Base, CreatedAtMixin, UUIDMixin
from restaurant_rag.models.document import DocumentSource, DocumentType


class DocumentModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Document ORM model.

    Attributes:
        id: UUID primary key, generated at ingestion time
        tenant_id: Owning restaurant
        title: Document title (CSV uploads use the filename)
        doc_type: Enumerated document type
        content: Full original text
        chunk_count: Number of chunk rows written with the document
        tags: Free-form labels
        source: text or csv
        created_at: Ingestion timestamp (UTC)

    Relationships:
        chunks: Child ChunkModels (cascade delete)
    """

    __tablename__ = "documents"
    __table_args__ = (Index("ix_documents_tenant_created", "tenant_id", "created_at"),)

    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    doc_type: Mapped[DocumentType] = mapped_column(
        Enum(DocumentType, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DocumentType.OTHER,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tags: Mapped[list[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
    source: Mapped[DocumentSource] = mapped_column(
        Enum(DocumentSource, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DocumentSource.TEXT,
    )

    chunks = relationship(
        "ChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

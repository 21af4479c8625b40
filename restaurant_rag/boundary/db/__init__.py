"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, CreatedAtMixin: Model building blocks
  - DatabaseHandle: Injected async engine/session owner
  - DocumentModel, ChunkModel: Persistent entities
  - document_crud, chunk_crud: CRUD operation singletons

Dependencies: sqlalchemy, pgvector, restaurant_rag.configs
System role: Database adapter for documents and their chunks
"""

from restaurant_rag.boundary.db.base import Base, CreatedAtMixin, UUIDMixin
from restaurant_rag.boundary.db.connection import DatabaseHandle
from restaurant_rag.boundary.db.CRUD import (
    BaseCRUD,
    ChunkCRUD,
    DocumentCRUD,
    chunk_crud,
    document_crud,
)
from restaurant_rag.boundary.db.models import EMBEDDING_DIMENSION, ChunkModel, DocumentModel

__all__ = [
    "Base",
    "CreatedAtMixin",
    "UUIDMixin",
    "DatabaseHandle",
    "EMBEDDING_DIMENSION",
    "ChunkModel",
    "DocumentModel",
    "BaseCRUD",
    "ChunkCRUD",
    "DocumentCRUD",
    "chunk_crud",
    "document_crud",
]

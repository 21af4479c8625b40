"""ORM models registered on Base.metadata."""

from restaurant_rag.boundary.db.models.chunk_model import EMBEDDING_DIMENSION, ChunkModel
from restaurant_rag.boundary.db.models.document_model import DocumentModel

__all__ = ["EMBEDDING_DIMENSION", "ChunkModel", "DocumentModel"]

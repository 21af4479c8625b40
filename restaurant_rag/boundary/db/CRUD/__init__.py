"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from restaurant_rag.boundary.db.CRUD import document_crud, chunk_crud

    documents = await document_crud.list_by_tenant(session, "fika")
"""

from restaurant_rag.boundary.db.CRUD.base_crud import BaseCRUD
from restaurant_rag.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from restaurant_rag.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = [
    "BaseCRUD",
    "ChunkCRUD",
    "chunk_crud",
    "DocumentCRUD",
    "document_crud",
]

"""
Chunk stores: interface, PostgreSQL/pgvector implementation, in-memory implementation and factory.
"""

from restaurant_rag.boundary.vdb.chunk_store import ChunkStore
from restaurant_rag.boundary.vdb.memory_store import InMemoryChunkStore
from restaurant_rag.boundary.vdb.postgres_store import PostgresChunkStore
from restaurant_rag.boundary.vdb.store_factory import create_chunk_store

__all__ = ["ChunkStore", "InMemoryChunkStore", "PostgresChunkStore", "create_chunk_store"]

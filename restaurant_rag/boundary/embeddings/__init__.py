"""Embedding provider adapter."""

from restaurant_rag.boundary.embeddings.client import EmbeddingClient, parse_embedding_response

__all__ = ["EmbeddingClient", "parse_embedding_response"]

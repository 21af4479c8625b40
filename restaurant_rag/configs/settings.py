"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from restaurant_rag.configs.base import BaseSettings
from restaurant_rag.configs.database import DatabaseSettings
from restaurant_rag.configs.embedding import EmbeddingSettings
from restaurant_rag.configs.ingestion import IngestionSettings
from restaurant_rag.configs.retrieval import RetrievalSettings
from restaurant_rag.configs.tenants import TenantSettings
from restaurant_rag.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    tenants: TenantSettings = Field(default_factory=TenantSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once and cached.

    Returns:
        Settings: Application settings instance

    Usage:
        from restaurant_rag.configs import get_settings
        settings = get_settings()
    """
    return Settings()

"""
Chunk store configuration settings.

Selects the store backend and tunes the semantic and lexical indexes.

Dependencies: pydantic, pydantic_settings
System role: Search index configuration for hybrid retrieval
"""

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from restaurant_rag.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Chunk store configuration (in-memory for dev, PostgreSQL + pgvector for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="postgres",
        description="Store type: 'memory' for local dev, 'postgres' for production",
    )
    text_search_config: str = Field(
        default="english",
        description="PostgreSQL full-text search configuration",
    )
    trigram_threshold: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Minimum pg_trgm word similarity for a fuzzy lexical match",
    )
    fuzzy_max_edits: int = Field(
        default=1,
        ge=0,
        le=2,
        description="Levenshtein edits allowed between a query word and a chunk word",
    )
    candidate_multiplier: int = Field(
        default=10,
        ge=1,
        description="Vector candidate pool = result limit x multiplier",
    )

    @field_validator("text_search_config")
    @classmethod
    def _check_search_config(cls, value: str) -> str:
        if not value.isidentifier():
            raise ValueError(f"Invalid text search configuration: {value!r}")
        return value

"""
Embedding provider configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Credentials and batching limits for the embedding provider
"""

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from restaurant_rag.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """OpenAI-compatible embedding endpoint configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: SecretStr | None = Field(default=None, description="Provider API key")
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL exposing POST /embeddings",
    )
    model: str = Field(default="text-embedding-3-small", description="Embedding model id")
    dimension: int = Field(default=1536, gt=0, description="Embedding vector dimension")
    max_batch_size: int = Field(default=100, gt=0, description="Inputs per provider call")
    batch_delay_seconds: float = Field(
        default=0.2,
        ge=0.0,
        description="Pacing delay between successive batch calls",
    )
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-call deadline")
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per batch for throttled or transient failures",
    )

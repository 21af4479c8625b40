"""
Retrieval and chunking configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Fusion constants, fan-out and chunk sizing
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from restaurant_rag.configs.base import BaseSettings


class RetrievalSettings(BaseSettings):
    """Hybrid retrieval configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    rrf_k: int = Field(default=60, gt=0, description="Reciprocal rank fusion smoothing constant")
    default_limit: int = Field(default=5, gt=0, description="Results returned when no limit is given")
    max_limit: int = Field(default=10, gt=0, description="Largest accepted result limit")
    fanout_multiplier: int = Field(
        default=4,
        ge=1,
        description="Candidates requested per branch = limit x multiplier",
    )
    min_fanout: int = Field(default=20, gt=0, description="Lower bound on per-branch candidates")
    semantic_timeout_seconds: float = Field(default=10.0, gt=0)
    lexical_timeout_seconds: float = Field(default=5.0, gt=0)

    chunk_max_chars: int = Field(default=1000, gt=0)
    chunk_overlap_chars: int = Field(default=200, ge=0)

    @model_validator(mode="after")
    def _check_chunk_bounds(self) -> "RetrievalSettings":
        if self.chunk_overlap_chars >= self.chunk_max_chars:
            raise ValueError("chunk_overlap_chars must be smaller than chunk_max_chars")
        return self

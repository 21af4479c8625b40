"""
Tabular ingestion configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Limits and formatting for CSV uploads
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from restaurant_rag.configs.base import BaseSettings


class IngestionSettings(BaseSettings):
    """CSV upload configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    max_csv_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="Upload size cap")
    currency_label: str = Field(default="PHP", description="Prefix for money columns")

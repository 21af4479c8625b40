"""
CSV upload schemas.

Dependencies: pydantic
System role: Tabular ingestion contracts
"""

import enum
import uuid

from pydantic import BaseModel, Field


class CsvCategory(str, enum.Enum):
    """Semantic category of a point-of-sale export."""

    PRODUCTS = "products"
    SALES = "sales"
    INVENTORY = "inventory"


class CsvIngestResult(BaseModel):
    """Outcome of a CSV upload."""

    document_id: uuid.UUID
    filename: str
    category: CsvCategory
    rows_ingested: int
    replaced_documents: int = Field(default=0, description="Earlier uploads of the same file removed")

"""Service orchestrators."""

from .csv_service import CsvIngestionService
from .document_service import DocumentService
from .search_service import SearchService

__all__ = [
    "CsvIngestionService",
    "DocumentService",
    "SearchService",
]

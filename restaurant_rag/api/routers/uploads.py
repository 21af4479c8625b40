"""
CSV upload endpoint.

Routes: POST /tenants/{tenant_id}/uploads/csv (multipart: file, optional category)

Dependencies: fastapi, python-multipart, restaurant_rag.application.services
System role: Tabular ingestion HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from restaurant_rag.api.deps import get_csv_service
from restaurant_rag.api.routers.error_handling import handle_service_errors
from restaurant_rag.application.services import CsvIngestionService
from restaurant_rag.models.csv_upload import CsvIngestResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["uploads"])


@router.post(
    "/{tenant_id}/uploads/csv",
    response_model=CsvIngestResult,
    status_code=status.HTTP_201_CREATED,
)
@handle_service_errors
async def upload_csv(
    tenant_id: str,
    file: UploadFile = File(...),
    category: str | None = Form(default=None),
    csv_service: CsvIngestionService = Depends(get_csv_service),
) -> CsvIngestResult:
    """
    Ingest a POS export; each row becomes one searchable chunk.

    Raises:
        HTTPException(400): Oversize, empty or unrecognised file
    """
    # One byte past the cap is enough for the service to reject an oversize file
    data = await file.read(csv_service.max_bytes + 1)
    logger.info(
        "CSV upload received",
        extra={"tenant_id": tenant_id, "file_name": file.filename, "size": len(data)},
    )
    return await csv_service.ingest_csv(
        tenant_id=tenant_id,
        filename=file.filename or "",
        data=data,
        category=category,
    )

"""
Health check API endpoints.

Routes: GET /health, GET /health/status

Dependencies: restaurant_rag.application.services
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from restaurant_rag.api.deps import get_document_service
from restaurant_rag.api.routers.error_handling import handle_service_errors
from restaurant_rag.application.services import DocumentService
from restaurant_rag.models.document import StatusResponse


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/status", response_model=StatusResponse)
@handle_service_errors
async def knowledge_base_status(
    document_service: DocumentService = Depends(get_document_service),
) -> StatusResponse:
    """Whether the knowledge base is configured, plus all-tenant stats."""
    return await document_service.status()

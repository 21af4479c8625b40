"""
Input validation shared by the services.

Everything here runs before any I/O and raises ValidationError.

Dependencies: restaurant_rag.configs, restaurant_rag.core.exceptions
System role: Request validation for service operations
"""

from restaurant_rag.configs.tenants import TenantSettings
from restaurant_rag.core.exceptions import ValidationError
from restaurant_rag.models.document import DocumentType


def validate_tenant(tenants: TenantSettings, tenant_id: str) -> str:
    """Return the tenant id if registered, else raise ValidationError."""
    if not tenant_id or not tenants.is_known(tenant_id):
        raise ValidationError(
            f"Unknown tenant: {tenant_id!r}",
            field="tenant_id",
            details={"known_tenants": sorted(tenants.registry)},
        )
    return tenant_id


def parse_document_type(value: str | DocumentType | None) -> DocumentType:
    """Coerce a document type name (case-insensitive) into DocumentType."""
    if isinstance(value, DocumentType):
        return value
    if value is None:
        return DocumentType.OTHER
    try:
        return DocumentType(value.strip().lower())
    except ValueError as e:
        raise ValidationError(
            f"Unknown document type: {value!r}",
            field="document_type",
            details={"allowed": [t.value for t in DocumentType]},
        ) from e

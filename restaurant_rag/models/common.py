"""
Common models shared across layers.

Dependencies: pydantic
System role: Tenant scoping for store queries
"""

from pydantic import BaseModel, ConfigDict, model_validator


class TenantScope(BaseModel):
    """
    Scope of an aggregate query.

    Either exactly one tenant, or every tenant through the explicit
    ``all_tenants()`` opt-in. There is no implicit unscoped value.
    """

    model_config = ConfigDict(frozen=True)

    tenant_id: str | None = None
    include_all: bool = False

    @model_validator(mode="after")
    def _exactly_one(self) -> "TenantScope":
        if self.include_all == (self.tenant_id is not None):
            raise ValueError("TenantScope needs either a tenant_id or include_all=True")
        return self

    @classmethod
    def single(cls, tenant_id: str) -> "TenantScope":
        return cls(tenant_id=tenant_id)

    @classmethod
    def all_tenants(cls) -> "TenantScope":
        return cls(include_all=True)

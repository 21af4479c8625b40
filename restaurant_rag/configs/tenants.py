"""
Tenant registry settings.

Each tenant is one restaurant. The registry is the allow-list every
operation validates tenant ids against.

Dependencies: pydantic, pydantic_settings
System role: Tenant allow-list and display names
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from restaurant_rag.configs.base import BaseSettings

DEFAULT_TENANTS: dict[str, str] = {
    "harveys_wings": "Harvey's Wings",
    "bakugo_ramen": "Bakugo Ramen",
    "wildflower": "Wildflower Tea House",
    "fika": "Fika Cafe",
    "harveys_chicken": "Harvey's Chicken",
}


class TenantSettings(BaseSettings):
    """Known tenants keyed by id, valued by display name."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TENANTS_",
        case_sensitive=False,
        extra="ignore",
    )

    registry: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_TENANTS))

    def is_known(self, tenant_id: str) -> bool:
        return tenant_id in self.registry

    def display_name(self, tenant_id: str) -> str:
        """Display name for a tenant, title-casing the id when unregistered."""
        if tenant_id in self.registry:
            return self.registry[tenant_id]
        return tenant_id.replace("_", " ").title()

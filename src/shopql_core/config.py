"""Environment-driven settings for the Shopify client."""
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .shopify.exceptions import ShopifyConfigError


DEFAULT_API_VERSION = "2024-10"


class ShopifySettings(BaseModel):
    """Connection settings for one Shopify store."""

    shop_domain: str = Field(..., min_length=1, description="e.g., mystore.myshopify.com")
    access_token: str = Field(..., min_length=1, repr=False)
    api_version: str = DEFAULT_API_VERSION
    redis_url: Optional[str] = Field(None, description="Enables the per-shop bulk lock")
    poll_interval: float = Field(1.0, gt=0)
    poll_timeout: Optional[float] = Field(None, gt=0)
    max_retries: int = Field(6, ge=0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShopifySettings":
        """Load settings from SHOPIFY_* / REDIS_URL environment variables."""
        env = os.environ if environ is None else environ

        shop_domain = env.get("SHOPIFY_STORE_DOMAIN")
        access_token = env.get("SHOPIFY_ADMIN_ACCESS_TOKEN")
        missing = [
            name
            for name, value in (
                ("SHOPIFY_STORE_DOMAIN", shop_domain),
                ("SHOPIFY_ADMIN_ACCESS_TOKEN", access_token),
            )
            if not value
        ]
        if missing:
            raise ShopifyConfigError(f"{' and '.join(missing)} must be set")

        values = {
            "shop_domain": shop_domain,
            "access_token": access_token,
            "api_version": env.get("SHOPIFY_API_VERSION", DEFAULT_API_VERSION),
            "redis_url": env.get("REDIS_URL") or None,
            "poll_interval": env.get("SHOPIFY_BULK_POLL_INTERVAL", "1.0"),
            "poll_timeout": env.get("SHOPIFY_BULK_POLL_TIMEOUT") or None,
            "max_retries": env.get("SHOPIFY_MAX_RETRIES", "6"),
        }
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ShopifyConfigError(f"Invalid Shopify settings: {exc}") from exc

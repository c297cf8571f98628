"""Unit tests for environment-driven settings."""
import pytest

from shopql_core.config import ShopifySettings
from shopql_core.shopify.exceptions import ShopifyConfigError


BASE_ENV = {
    "SHOPIFY_STORE_DOMAIN": "test.myshopify.com",
    "SHOPIFY_ADMIN_ACCESS_TOKEN": "shpat_fake_token",
}


def test_defaults():
    settings = ShopifySettings.from_env(BASE_ENV)

    assert settings.shop_domain == "test.myshopify.com"
    assert settings.api_version == "2024-10"
    assert settings.redis_url is None
    assert settings.poll_interval == 1.0
    assert settings.poll_timeout is None
    assert settings.max_retries == 6


def test_overrides():
    env = {
        **BASE_ENV,
        "SHOPIFY_API_VERSION": "2025-01",
        "REDIS_URL": "redis://localhost:6379/0",
        "SHOPIFY_BULK_POLL_INTERVAL": "5",
        "SHOPIFY_BULK_POLL_TIMEOUT": "600",
        "SHOPIFY_MAX_RETRIES": "2",
    }

    settings = ShopifySettings.from_env(env)

    assert settings.api_version == "2025-01"
    assert settings.redis_url == "redis://localhost:6379/0"
    assert settings.poll_interval == 5.0
    assert settings.poll_timeout == 600.0
    assert settings.max_retries == 2


def test_missing_credentials():
    with pytest.raises(ShopifyConfigError) as exc_info:
        ShopifySettings.from_env({})

    assert "SHOPIFY_STORE_DOMAIN" in str(exc_info.value)
    assert "SHOPIFY_ADMIN_ACCESS_TOKEN" in str(exc_info.value)


def test_invalid_interval():
    with pytest.raises(ShopifyConfigError):
        ShopifySettings.from_env({**BASE_ENV, "SHOPIFY_BULK_POLL_INTERVAL": "0"})


def test_token_not_in_repr():
    settings = ShopifySettings.from_env(BASE_ENV)

    assert "shpat_fake_token" not in repr(settings)

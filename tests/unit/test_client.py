"""Unit tests for the ShopifyClient facade."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shopql_core.config import ShopifySettings
from shopql_core.shopify.client import ShopifyClient


@pytest.fixture
def settings():
    return ShopifySettings(
        shop_domain="test.myshopify.com",
        access_token="shpat_fake_token",
        redis_url="redis://localhost:6379/0",
        poll_interval=2.0,
        poll_timeout=60.0,
        max_retries=3,
    )


def test_wires_services_to_one_bulk_client():
    client = ShopifyClient("test.myshopify.com", "shpat_fake_token", session=MagicMock())

    assert client.bulk.graphql is client.graphql
    assert client.products.bulk is client.bulk
    assert client.collections.bulk is client.bulk
    assert client.metafields.bulk is client.bulk
    assert client.bulk.redis is None


@pytest.mark.asyncio
async def test_from_settings_owns_and_closes_resources(settings):
    mock_redis = AsyncMock()
    mock_session = AsyncMock()

    with patch(
        "shopql_core.shopify.client.Redis.from_url", return_value=mock_redis
    ) as from_url, patch(
        "shopql_core.shopify.client.aiohttp.ClientSession", return_value=mock_session
    ):
        async with ShopifyClient.from_settings(settings) as client:
            assert client.graphql.max_retries == 3
            assert client.bulk.poll_interval == 2.0
            assert client.bulk.poll_timeout == 60.0
            assert client.bulk.redis is mock_redis

    from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=False)
    mock_redis.aclose.assert_awaited_once()
    mock_session.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_injected_session_left_open(settings):
    session = AsyncMock()
    settings = settings.model_copy(update={"redis_url": None})

    async with ShopifyClient.from_settings(settings, session=session):
        pass

    session.close.assert_not_awaited()

"""Unit tests for ShopifyGraphQLClient retry and error mapping."""
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from shopql_core.shopify.exceptions import (
    ShopifyApiError,
    ShopifyForbiddenError,
    ShopifyGraphQLError,
    ShopifyInternalError,
    ShopifyRateLimitError,
    ShopifyTimeoutError,
    ShopifyUnauthorizedError,
    is_rate_limit_error,
    is_retryable_error,
    is_unauthorized_error,
)
from shopql_core.shopify.graphql_client import ShopifyGraphQLClient, error_for_status


TOKEN = "shpat_fake_token"


@pytest.fixture
def mock_session():
    return MagicMock()


@pytest.fixture
def client(mock_session):
    return ShopifyGraphQLClient(
        shop_domain="test.myshopify.com",
        admin_access_token=TOKEN,
        api_version="2024-10",
        session=mock_session,
        max_retries=2,
    )


def _response(status=200, payload=None, text="", headers=None):
    response = AsyncMock()
    response.status = status
    response.headers = headers or {}
    response.text.return_value = text
    response.json.return_value = payload
    response.raise_for_status = MagicMock()  # Sync method in aiohttp
    response.__aenter__.return_value = response
    response.__aexit__.return_value = False
    return response


def test_endpoint_built_from_domain_and_version(client):
    assert client.graphql_endpoint == (
        "https://test.myshopify.com/admin/api/2024-10/graphql.json"
    )


@pytest.mark.asyncio
async def test_query_returns_data_and_sends_token(client, mock_session):
    mock_session.post.return_value = _response(payload={"data": {"shop": {"name": "x"}}})

    data = await client.query("{ shop { name } }", {"a": 1})

    assert data == {"shop": {"name": "x"}}
    kwargs = mock_session.post.call_args.kwargs
    assert kwargs["json"] == {"query": "{ shop { name } }", "variables": {"a": 1}}
    assert kwargs["headers"]["X-Shopify-Access-Token"] == TOKEN


@pytest.mark.asyncio
async def test_query_missing_data(client, mock_session):
    mock_session.post.return_value = _response(payload={"extensions": {}})

    with pytest.raises(ShopifyApiError, match="missing data"):
        await client.query("{ shop { name } }")


@pytest.mark.asyncio
async def test_root_level_errors_trigger_exception(client, mock_session):
    """Root ["errors"] raise ShopifyGraphQLError before data access."""
    mock_session.post.return_value = _response(
        payload={
            "errors": [
                {"message": "Access denied to resource"},
                {"message": "Insufficient permissions"},
            ]
        }
    )

    with pytest.raises(ShopifyGraphQLError) as exc_info:
        await client.post_graphql({"query": "test"})

    assert "Access denied" in str(exc_info.value)
    assert "Insufficient permissions" in str(exc_info.value)


@pytest.mark.asyncio
async def test_http_429_with_retry_after(client, mock_session):
    """post_graphql respects the Retry-After header on 429."""
    mock_session.post.side_effect = [
        _response(status=429, text="Rate limited", headers={"Retry-After": "0.1"}),
        _response(payload={"data": {"test": "success"}}),
    ]

    with patch("shopql_core.shopify.graphql_client.asyncio.sleep", new=AsyncMock()) as sleep:
        result = await client.post_graphql({"query": "test"})

    assert result == {"data": {"test": "success"}}
    assert mock_session.post.call_count == 2
    sleep.assert_awaited_once_with(0.1)


@pytest.mark.asyncio
async def test_http_429_exhausted(client, mock_session):
    mock_session.post.return_value = _response(status=429, text="Rate limited")

    with patch("shopql_core.shopify.graphql_client.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(ShopifyRateLimitError) as exc_info:
            await client.post_graphql({"query": "test"})

    assert mock_session.post.call_count == 3
    assert is_rate_limit_error(exc_info.value)
    assert is_retryable_error(exc_info.value)


@pytest.mark.asyncio
async def test_http_5xx_retried_then_succeeds(client, mock_session):
    mock_session.post.side_effect = [
        _response(status=503, text="unavailable"),
        _response(payload={"data": {"ok": True}}),
    ]

    with patch("shopql_core.shopify.graphql_client.asyncio.sleep", new=AsyncMock()):
        result = await client.post_graphql({"query": "test"})

    assert result["data"] == {"ok": True}


@pytest.mark.asyncio
async def test_http_4xx_non_retryable(client, mock_session):
    """post_graphql raises immediately on 4xx (except 429)."""
    mock_session.post.return_value = _response(status=403, text="Forbidden")

    with pytest.raises(ShopifyForbiddenError) as exc_info:
        await client.post_graphql({"query": "test"})

    assert "403" in str(exc_info.value)
    assert "non-retryable" in str(exc_info.value)
    assert exc_info.value.status == 403
    assert mock_session.post.call_count == 1  # No retry


@pytest.mark.asyncio
async def test_http_401_redacts_token(client, mock_session):
    mock_session.post.return_value = _response(
        status=401, text=f"Invalid API key or access token: {TOKEN}"
    )

    with pytest.raises(ShopifyUnauthorizedError) as exc_info:
        await client.post_graphql({"query": "test"})

    assert TOKEN not in str(exc_info.value)
    assert is_unauthorized_error(exc_info.value)
    assert not is_retryable_error(exc_info.value)


@pytest.mark.asyncio
async def test_graphql_throttled_is_retried(client, mock_session):
    mock_session.post.side_effect = [
        _response(
            payload={"errors": [{"message": "Throttled", "extensions": {"code": "THROTTLED"}}]}
        ),
        _response(payload={"data": {"ok": True}}),
    ]

    with patch("shopql_core.shopify.graphql_client.asyncio.sleep", new=AsyncMock()) as sleep:
        result = await client.post_graphql({"query": "test"})

    assert result["data"] == {"ok": True}
    assert sleep.await_count == 1


@pytest.mark.asyncio
async def test_network_error_exhausted(client, mock_session):
    mock_session.post.side_effect = aiohttp.ClientConnectionError("connection reset")

    with patch("shopql_core.shopify.graphql_client.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(ShopifyTimeoutError):
            await client.post_graphql({"query": "test"})

    assert mock_session.post.call_count == 3


@pytest.mark.asyncio
async def test_no_retry_when_disabled(client, mock_session):
    mock_session.post.return_value = _response(status=500, text="boom")

    with pytest.raises(ShopifyInternalError):
        await client.post_graphql({"query": "test"}, retry=False)

    assert mock_session.post.call_count == 1


def test_error_for_status_mapping():
    assert isinstance(error_for_status(429, "x"), ShopifyRateLimitError)
    assert isinstance(error_for_status(502, "x"), ShopifyInternalError)
    assert isinstance(error_for_status(401, "x"), ShopifyUnauthorizedError)
    assert type(error_for_status(400, "x")) is ShopifyApiError

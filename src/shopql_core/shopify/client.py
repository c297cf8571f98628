"""ShopifyClient: one store's transport, bulk client and resource services."""
import logging
from typing import TYPE_CHECKING, Optional

import aiohttp
from redis.asyncio import Redis

from .bulk_client import ShopifyBulkClient
from .graphql_client import ShopifyGraphQLClient
from .services import CollectionService, MetafieldService, ProductService
from .type_registry import DEFAULT_TYPE_REGISTRY, TypeRegistry

if TYPE_CHECKING:
    from ..config import ShopifySettings


class ShopifyClient:
    """Entry point wiring the GraphQL transport, bulk client and services.

    Sessions and Redis clients passed in are left open; ones created by
    from_settings() are closed by close() / `async with`.
    """

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        session: aiohttp.ClientSession,
        api_version: str = "2024-10",
        redis: Optional[Redis] = None,
        registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
        poll_interval: float = ShopifyBulkClient.DEFAULT_POLL_INTERVAL,
        poll_timeout: Optional[float] = None,
        max_retries: int = ShopifyGraphQLClient.MAX_RETRY_ATTEMPTS,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.graphql = ShopifyGraphQLClient(
            shop_domain=shop_domain,
            admin_access_token=access_token,
            api_version=api_version,
            session=session,
            max_retries=max_retries,
            logger=self.logger,
        )
        self.bulk = ShopifyBulkClient(
            self.graphql,
            redis=redis,
            registry=registry,
            poll_interval=poll_interval,
            poll_timeout=poll_timeout,
            logger=self.logger,
        )
        self.products = ProductService(self.bulk)
        self.collections = CollectionService(self.bulk)
        self.metafields = MetafieldService(self.bulk)

        self._owned_session: Optional[aiohttp.ClientSession] = None
        self._owned_redis: Optional[Redis] = None

    @classmethod
    def from_settings(
        cls,
        settings: "ShopifySettings",
        session: Optional[aiohttp.ClientSession] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "ShopifyClient":
        """Build a client from settings, creating the session/Redis it needs."""
        owned_session = None
        if session is None:
            timeout = aiohttp.ClientTimeout(total=300, connect=30)
            session = owned_session = aiohttp.ClientSession(timeout=timeout)

        redis = None
        if settings.redis_url:
            redis = Redis.from_url(settings.redis_url, decode_responses=False)

        client = cls(
            shop_domain=settings.shop_domain,
            access_token=settings.access_token,
            session=session,
            api_version=settings.api_version,
            redis=redis,
            poll_interval=settings.poll_interval,
            poll_timeout=settings.poll_timeout,
            max_retries=settings.max_retries,
            logger=logger,
        )
        client._owned_session = owned_session
        client._owned_redis = redis
        return client

    async def close(self) -> None:
        if self._owned_redis is not None:
            await self._owned_redis.aclose()
            self._owned_redis = None
        if self._owned_session is not None:
            await self._owned_session.close()
            self._owned_session = None

    async def __aenter__(self) -> "ShopifyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

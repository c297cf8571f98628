"""Async Shopify Admin GraphQL transport with retry and error mapping."""
import asyncio
import logging
import random
from typing import Any, Optional

import aiohttp

from .exceptions import (
    ShopifyApiError,
    ShopifyForbiddenError,
    ShopifyGraphQLError,
    ShopifyInternalError,
    ShopifyLockedError,
    ShopifyNotFoundError,
    ShopifyPaymentRequiredError,
    ShopifyRateLimitError,
    ShopifyTimeoutError,
    ShopifyUnauthorizedError,
)


THROTTLED_CODES = {"THROTTLED", "MAX_COST_EXCEEDED"}

_STATUS_ERRORS: dict[int, type[ShopifyApiError]] = {
    401: ShopifyUnauthorizedError,
    402: ShopifyPaymentRequiredError,
    403: ShopifyForbiddenError,
    404: ShopifyNotFoundError,
    423: ShopifyLockedError,
}


def _redact(text: str, token: str) -> str:
    if not text or not token:
        return text
    return text.replace(token, "[REDACTED]")


def error_for_status(status: int, message: str) -> ShopifyApiError:
    """Map an HTTP status to the matching ShopifyApiError subclass."""
    if status == 429:
        return ShopifyRateLimitError(message, status=status)
    if 500 <= status < 600:
        return ShopifyInternalError(message, status=status)
    return _STATUS_ERRORS.get(status, ShopifyApiError)(message, status=status)


class ShopifyGraphQLClient:
    """Async client for the Shopify GraphQL Admin API.

    Implements defensive retry logic for 429/5xx/network errors and for
    GraphQL-level throttling.
    """

    MAX_RETRY_ATTEMPTS = 6
    RETRY_BASE_DELAY = 0.5  # seconds
    RETRY_MULTIPLIER = 2.0
    RETRY_MAX_DELAY = 30.0  # seconds
    RETRY_JITTER_MS = 250  # milliseconds

    def __init__(
        self,
        shop_domain: str,
        admin_access_token: str,
        api_version: str,
        session: aiohttp.ClientSession,
        max_retries: int = MAX_RETRY_ATTEMPTS,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Shopify GraphQL client.

        Args:
            shop_domain: e.g., "mystore.myshopify.com"
            admin_access_token: Offline access token (never logged)
            api_version: e.g., "2024-10"
            session: Injected aiohttp ClientSession
            max_retries: Retries for transient failures before giving up
            logger: Optional logger instance
        """
        self.shop_domain = shop_domain
        self._access_token = admin_access_token
        self.api_version = api_version
        self.session = session
        self.max_retries = max_retries
        self.logger = logger or logging.getLogger(__name__)

        self.graphql_endpoint = (
            f"https://{shop_domain}/admin/api/{api_version}/graphql.json"
        )

    async def query(
        self, query: str, variables: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """Run a query/mutation and return its `data` object."""
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        resp_data = await self.post_graphql(payload)
        data = resp_data.get("data")
        if data is None:
            raise ShopifyApiError("GraphQL response missing data")
        return data

    async def post_graphql(self, payload: dict, retry: bool = True) -> dict:
        """Execute GraphQL POST with retry logic.

        Args:
            payload: GraphQL query/mutation payload
            retry: Whether to retry on transient errors

        Returns:
            Parsed JSON response data

        Raises:
            ShopifyApiError: On non-retryable errors or max retries exceeded
            ShopifyGraphQLError: On root-level GraphQL errors
        """
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self._access_token,
        }

        attempt = 0
        while True:
            attempt += 1
            exhausted = not retry or attempt > self.max_retries

            try:
                timeout = aiohttp.ClientTimeout(total=60, connect=10)
                async with self.session.post(
                    self.graphql_endpoint,
                    json=payload,
                    headers=headers,
                    timeout=timeout,
                ) as resp:
                    # Handle 429 (Rate Limit)
                    if resp.status == 429:
                        response_text = await resp.text()
                        if exhausted:
                            raise ShopifyRateLimitError(
                                f"HTTP 429 after {attempt} attempts: {response_text[:200]}",
                                status=429,
                            )

                        retry_after = resp.headers.get("Retry-After")
                        if retry_after:
                            delay = float(retry_after)
                            self.logger.warning(
                                f"HTTP 429, Retry-After={delay}s, attempt={attempt}"
                            )
                        else:
                            delay = self._calculate_backoff(attempt)
                            self.logger.warning(
                                f"HTTP 429, backoff={delay:.2f}s, attempt={attempt}"
                            )

                        await asyncio.sleep(delay)
                        continue

                    # Handle 5xx (Server Errors)
                    if 500 <= resp.status < 600:
                        response_text = await resp.text()
                        if exhausted:
                            raise ShopifyInternalError(
                                f"HTTP {resp.status} after {attempt} attempts: {response_text[:200]}",
                                status=resp.status,
                            )

                        delay = self._calculate_backoff(attempt)
                        self.logger.warning(
                            f"HTTP {resp.status}, backoff={delay:.2f}s, attempt={attempt}"
                        )
                        await asyncio.sleep(delay)
                        continue

                    # Handle other 4xx (Client Errors - no retry)
                    if 400 <= resp.status < 500:
                        response_text = await resp.text()
                        raise error_for_status(
                            resp.status,
                            f"HTTP {resp.status} (non-retryable): "
                            f"{_redact(response_text[:500], self._access_token)}",
                        )

                    resp.raise_for_status()
                    json_data = await resp.json()

                    # Check root-level errors BEFORE accessing data
                    errors = json_data.get("errors")
                    if errors:
                        if self._is_throttled(errors):
                            if exhausted:
                                raise ShopifyRateLimitError(
                                    f"GraphQL throttled after {attempt} attempts"
                                )
                            delay = self._calculate_backoff(attempt)
                            self.logger.warning(
                                f"GraphQL throttled, backoff={delay:.2f}s, attempt={attempt}"
                            )
                            await asyncio.sleep(delay)
                            continue

                        error_messages = [
                            e.get("message", str(e)) if isinstance(e, dict) else str(e)
                            for e in (errors if isinstance(errors, list) else [errors])
                        ]
                        raise ShopifyGraphQLError(
                            f"GraphQL root errors: {'; '.join(error_messages)}"
                        )

                    return json_data

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                if exhausted:
                    raise ShopifyTimeoutError(
                        f"Network error after {attempt} attempts: {e}"
                    ) from e

                delay = self._calculate_backoff(attempt)
                self.logger.warning(
                    f"Network error: {e}, backoff={delay:.2f}s, attempt={attempt}"
                )
                await asyncio.sleep(delay)
                continue

    def _calculate_backoff(self, attempt: int) -> float:
        """Calculate exponential backoff with jitter.

        Args:
            attempt: Current retry attempt number (1-indexed)

        Returns:
            Delay in seconds
        """
        delay = min(
            self.RETRY_BASE_DELAY * (self.RETRY_MULTIPLIER ** (attempt - 1)),
            self.RETRY_MAX_DELAY,
        )
        jitter = random.uniform(0, self.RETRY_JITTER_MS / 1000.0)
        return delay + jitter

    @staticmethod
    def _is_throttled(errors: object) -> bool:
        if not isinstance(errors, list):
            return False
        for error in errors:
            if not isinstance(error, dict):
                continue
            code = (error.get("extensions") or {}).get("code")
            if code in THROTTLED_CODES:
                return True
        return False

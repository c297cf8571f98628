"""Async Shopify GraphQL Bulk Operations Client with Redis concurrency control."""
import asyncio
import logging
from time import monotonic
from typing import Optional, TypeVar

from pydantic import BaseModel
from redis.asyncio import Redis
from redis.asyncio.lock import Lock as AsyncRedisLock

from ..schemas.bulk_ops import BulkOperation, BulkOperationStatus
from .bulk_parser import BulkResultParser
from .downloader import download_to_tempfile
from .exceptions import (
    BulkJobLockedError,
    BulkOperationCanceledError,
    BulkOperationFailedError,
    BulkOperationInProgressError,
    BulkOperationMismatchError,
    BulkOperationTimeoutError,
    BulkQueryError,
    BulkResultError,
    ShopifyApiError,
    ShopifyGraphQLError,
    ShopifyNotFoundError,
)
from .graphql_client import ShopifyGraphQLClient
from .graphql_strings import (
    MUTATION_BULK_CANCEL,
    MUTATION_BULK_RUN_QUERY,
    QUERY_BULK_OP_BY_ID,
    QUERY_CURRENT_BULK_OP,
)
from .type_registry import DEFAULT_TYPE_REGISTRY, TypeRegistry


ModelT = TypeVar("ModelT", bound=BaseModel)

IN_PROGRESS_MARKER = "already in progress"


class ShopifyBulkClient:
    """Async client for Shopify GraphQL Admin Bulk Operations API.

    Shopify allows one bulk query per shop at a time. bulk_query() waits for
    any running job before submitting, and an optional Redis lock keeps
    separate processes from racing on the same shop.
    """

    LOCK_TTL_SECONDS = 1800  # 30 minutes
    LOCK_REFRESH_INTERVAL = 300  # 5 minutes
    DEFAULT_POLL_INTERVAL = 1.0  # seconds

    def __init__(
        self,
        graphql: ShopifyGraphQLClient,
        redis: Optional[Redis] = None,
        registry: TypeRegistry = DEFAULT_TYPE_REGISTRY,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        poll_timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Shopify Bulk Client.

        Args:
            graphql: Transport used for every GraphQL call
            redis: Optional redis.asyncio.Redis client for the per-shop lock
            registry: Resource kinds used to type nested result lines
            poll_interval: Fixed seconds between status polls
            poll_timeout: Optional max seconds to wait for one job
            logger: Optional logger instance
        """
        self.graphql = graphql
        self.shop_domain = graphql.shop_domain
        self.session = graphql.session
        self.redis = redis
        self.registry = registry
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.logger = logger or logging.getLogger(__name__)

        self._lock_key = f"shopql:shopify:bulk_lock:{self.shop_domain}"
        self._current_lock: Optional[AsyncRedisLock] = None
        self._query_lock = asyncio.Lock()

    async def submit_job(self, bulk_query: str) -> BulkOperation:
        """Submit a bulk operation query job to Shopify.

        Args:
            bulk_query: GraphQL query string for bulk operation

        Returns:
            BulkOperation with id and initial status

        Raises:
            BulkJobLockedError: If lock cannot be acquired
            BulkOperationInProgressError: If Shopify reports a running bulk query
            ShopifyGraphQLError: If GraphQL returns userErrors
            ShopifyApiError: For other API errors
        """
        await self._acquire_lock()

        try:
            data = await self.graphql.query(
                MUTATION_BULK_RUN_QUERY, {"query": bulk_query}
            )

            mutation_result = data["bulkOperationRunQuery"]
            user_errors = mutation_result.get("userErrors", [])
            if user_errors:
                if any(
                    IN_PROGRESS_MARKER in str(e.get("message", "")).lower()
                    for e in user_errors
                ):
                    raise BulkOperationInProgressError(user_errors)
                raise ShopifyGraphQLError(user_errors)

            op_data = mutation_result.get("bulkOperation")
            if not op_data or not op_data.get("id"):
                raise ShopifyApiError("Posted bulk operation ID is empty")
            operation = BulkOperation.from_node(op_data)

            self.logger.info(
                f"Submitted bulk job: id={operation.id}, status={operation.status.value}"
            )
            return operation

        except Exception:
            # Release lock on any failure during submit
            await self._release_lock_best_effort()
            raise

    async def get_current_operation(self) -> Optional[BulkOperation]:
        """Read the shop's current bulk query operation (None if there never was one)."""
        data = await self.graphql.query(QUERY_CURRENT_BULK_OP)
        node = data.get("currentBulkOperation")
        if node is None:
            return None
        return BulkOperation.from_node(node)

    async def get_operation(self, operation_id: str) -> BulkOperation:
        """Read a specific bulk operation by id."""
        data = await self.graphql.query(QUERY_BULK_OP_BY_ID, {"id": operation_id})
        node = data.get("node")
        if node is None:
            raise ShopifyNotFoundError(f"Bulk operation not found: id={operation_id}")
        return BulkOperation.from_node(node)

    async def get_bulk_query_result(self, operation_id: str) -> BulkOperation:
        """Current operation, checked to be `operation_id`."""
        operation = await self.get_current_operation()
        actual_id = operation.id if operation else None
        if actual_id != operation_id:
            raise BulkOperationMismatchError(operation_id, actual_id)
        return operation

    async def wait_for_current(
        self,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> Optional[BulkOperation]:
        """Poll the current operation until it leaves CREATED/RUNNING/CANCELING.

        Sleeps a fixed `interval` between polls. Cancelling the awaiting task
        interrupts the sleep and propagates CancelledError.

        Raises:
            BulkOperationTimeoutError: If `timeout` seconds pass first
        """
        interval = self.poll_interval if interval is None else interval
        timeout = self.poll_timeout if timeout is None else timeout

        start_time = monotonic()
        last_lock_refresh = monotonic()

        operation = await self.get_current_operation()
        while operation is not None and operation.is_active:
            elapsed = monotonic() - start_time
            if timeout is not None and elapsed > timeout:
                raise BulkOperationTimeoutError(
                    f"Bulk poll timeout after {elapsed:.1f}s for op={operation.id}"
                )

            # Refresh lock TTL every LOCK_REFRESH_INTERVAL
            if monotonic() - last_lock_refresh > self.LOCK_REFRESH_INTERVAL:
                await self._refresh_lock_ttl()
                last_lock_refresh = monotonic()

            self.logger.debug(
                f"Bulk operation is still {operation.status.value}, elapsed={elapsed:.1f}s"
            )
            await asyncio.sleep(interval)
            operation = await self.get_current_operation()

        if operation is not None:
            self.logger.debug(
                f"Bulk operation ready, latest status={operation.status.value}"
            )
        return operation

    async def get_result_url(
        self,
        expected_id: Optional[str] = None,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> Optional[str]:
        """Wait for the current operation and return its result url.

        Returns None when the operation completed without exporting objects.

        Raises:
            BulkOperationMismatchError: If the current operation isn't `expected_id`
            BulkOperationFailedError: If the operation FAILED or reports an error code
            BulkOperationCanceledError: If the operation was CANCELED or EXPIRED
            BulkResultError: If objects were exported but no url was returned
        """
        current = await self.get_current_operation()
        if expected_id is not None:
            actual_id = current.id if current else None
            if actual_id != expected_id:
                raise BulkOperationMismatchError(expected_id, actual_id)

        operation = await self.wait_for_current(interval, timeout)
        if operation is None:
            raise BulkResultError("No current bulk operation to read a result from")
        if expected_id is not None and operation.id != expected_id:
            raise BulkOperationMismatchError(expected_id, operation.id)

        if operation.status == BulkOperationStatus.FAILED or (
            operation.status == BulkOperationStatus.COMPLETED and operation.error_code
        ):
            raise BulkOperationFailedError(
                operation.id, operation.error_code, operation.partial_data_url
            )
        if operation.status != BulkOperationStatus.COMPLETED:
            raise BulkOperationCanceledError(operation.id, operation.status.value)

        if operation.object_count == 0:
            return None

        if not operation.url:
            raise BulkResultError(
                f"Bulk operation COMPLETED but url missing: {operation.id}"
            )

        self.logger.info(
            f"Bulk operation completed: {operation.id}, objects={operation.object_count}"
        )
        return operation.url

    async def cancel_current(
        self, interval: Optional[float] = None
    ) -> Optional[BulkOperation]:
        """Cancel the current operation if it is CREATED or RUNNING.

        Waits until it leaves CANCELING. A no-op when nothing is running.
        Releases the Redis lock taken by submit_job(), unless a bulk_query()
        on this client is in flight.
        """
        operation = await self.get_current_operation()
        if operation is None or operation.status not in (
            BulkOperationStatus.CREATED,
            BulkOperationStatus.RUNNING,
        ):
            return operation

        self.logger.info(f"Canceling running bulk operation: {operation.id}")
        data = await self.graphql.query(MUTATION_BULK_CANCEL, {"id": operation.id})
        user_errors = data["bulkOperationCancel"].get("userErrors", [])
        if user_errors:
            raise ShopifyGraphQLError(user_errors)

        operation = await self.wait_for_current(interval)
        # An in-flight bulk_query owns the lock and releases it itself
        if not self._query_lock.locked():
            await self._release_lock_best_effort()
        self.logger.info(
            f"Bulk operation cancelled: status={operation.status.value if operation else None}"
        )
        return operation

    async def bulk_query(
        self,
        query: str,
        model: type[ModelT],
        *,
        interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> list[ModelT]:
        """Run a bulk query and return its results decoded as `model`.

        Nested connections in the export are attached to their parents.
        An export with no objects returns an empty list. `timeout` bounds
        both waits together, not each one.

        Raises:
            BulkQueryError: naming the stage (wait, submit, result, download,
                parse) that failed, with the underlying error as `error`
        """
        parser = BulkResultParser(
            model, registry=self.registry, logger_instance=self.logger
        )

        timeout = self.poll_timeout if timeout is None else timeout
        deadline = None if timeout is None else monotonic() + timeout

        async with self._query_lock:
            stage = "wait"
            try:
                await self.wait_for_current(interval, timeout)

                stage = "submit"
                operation = await self.submit_job(query)

                stage = "result"
                remaining = None
                if deadline is not None:
                    remaining = max(deadline - monotonic(), 0.0)
                url = await self.get_result_url(operation.id, interval, remaining)
                await self._release_lock_best_effort()
                if not url:
                    self.logger.info(
                        f"Bulk operation returned no objects: {operation.id}"
                    )
                    return []

                stage = "download"
                async with download_to_tempfile(
                    self.session, url, logger_instance=self.logger
                ) as path:
                    stage = "parse"
                    return await parser.parse_file(path)

            except asyncio.TimeoutError:
                raise
            except Exception as exc:
                raise BulkQueryError(stage, exc) from exc
            finally:
                await self._release_lock_best_effort()

    async def _acquire_lock(self) -> None:
        """Acquire Redis lock (fail fast). No-op without Redis."""
        if self.redis is None:
            return

        lock = AsyncRedisLock(
            self.redis,
            name=self._lock_key,
            timeout=self.LOCK_TTL_SECONDS,
            blocking=False,
        )

        acquired = await lock.acquire(blocking=False)
        if not acquired:
            raise BulkJobLockedError(self.shop_domain, self._lock_key)

        self._current_lock = lock
        self.logger.info(f"Acquired bulk lock for shop={self.shop_domain}")

    async def _refresh_lock_ttl(self) -> None:
        """Extend Redis lock TTL to prevent expiry during long-running polls."""
        if self._current_lock:
            try:
                await self._current_lock.reacquire()
                self.logger.debug(
                    f"Refreshed bulk lock TTL for shop={self.shop_domain}"
                )
            except Exception as e:
                self.logger.error(f"Failed to refresh lock TTL: {e}")

    async def _release_lock_best_effort(self) -> None:
        """Release Redis lock with error suppression."""
        if self._current_lock:
            try:
                await self._current_lock.release()
                self.logger.info(f"Released bulk lock for shop={self.shop_domain}")
            except Exception as e:
                self.logger.error(f"Failed to release lock: {e}")
            finally:
                self._current_lock = None

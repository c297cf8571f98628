"""Custom exceptions for the Shopify GraphQL and Bulk clients."""
import asyncio
from typing import Optional


class ShopifyClientError(Exception):
    """Base exception for all Shopify client errors."""


class ShopifyConfigError(ShopifyClientError):
    """Raised when required configuration is missing or invalid."""


# Transport errors


class ShopifyApiError(ShopifyClientError):
    """Raised for Shopify API errors (HTTP 4xx/5xx, network, missing data)."""

    retryable = False

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class ShopifyRateLimitError(ShopifyApiError):
    """Raised on HTTP 429 or MAX_COST_EXCEEDED once retries are exhausted."""

    retryable = True


class ShopifyUnauthorizedError(ShopifyApiError):
    """Raised on HTTP 401 (invalid API key or access token)."""


class ShopifyPaymentRequiredError(ShopifyApiError):
    """Raised on HTTP 402 (shop is frozen)."""


class ShopifyForbiddenError(ShopifyApiError):
    """Raised on HTTP 403 (missing access scope)."""


class ShopifyNotFoundError(ShopifyApiError):
    """Raised on HTTP 404."""


class ShopifyLockedError(ShopifyApiError):
    """Raised on HTTP 423 (shop unavailable)."""


class ShopifyInternalError(ShopifyApiError):
    """Raised on HTTP 5xx once retries are exhausted."""

    retryable = True


class ShopifyTimeoutError(ShopifyApiError):
    """Raised on network errors or timeouts once retries are exhausted."""

    retryable = True


class ShopifyGraphQLError(ShopifyClientError):
    """Raised when GraphQL returns userErrors or root-level errors."""

    def __init__(self, user_errors: object):
        self.user_errors = user_errors
        if isinstance(user_errors, str):
            message = user_errors
        else:
            message = f"GraphQL userErrors: {user_errors}"
        super().__init__(message)


# Bulk operation lifecycle errors


class BulkOperationInProgressError(ShopifyGraphQLError):
    """Raised when Shopify rejects a submission because a bulk query is already running."""


class BulkJobLockedError(ShopifyClientError):
    """Raised when Redis lock cannot be acquired (another job in progress)."""

    def __init__(self, shop_domain: str, lock_key: str):
        self.shop_domain = shop_domain
        self.lock_key = lock_key
        super().__init__(
            f"Bulk operation lock already held for shop={shop_domain}, key={lock_key}"
        )


class BulkOperationFailedError(ShopifyClientError):
    """Raised when a bulk operation reaches FAILED or reports an error code."""

    def __init__(
        self,
        operation_id: str,
        error_code: Optional[str],
        partial_data_url: Optional[str] = None,
    ):
        self.operation_id = operation_id
        self.error_code = error_code
        self.partial_data_url = partial_data_url
        super().__init__(
            f"Bulk operation failed: id={operation_id}, error_code={error_code}, "
            f"partial_data_url={partial_data_url}"
        )


class BulkOperationCanceledError(ShopifyClientError):
    """Raised when a bulk operation ended CANCELED or EXPIRED instead of completing."""

    def __init__(self, operation_id: str, status: str):
        self.operation_id = operation_id
        self.status = status
        super().__init__(
            f"Bulk operation didn't complete: id={operation_id}, status={status}"
        )


class BulkOperationMismatchError(ShopifyClientError):
    """Raised when the current bulk operation is not the one that was submitted."""

    def __init__(self, expected_id: str, actual_id: Optional[str]):
        self.expected_id = expected_id
        self.actual_id = actual_id
        super().__init__(
            f"Bulk operation ID doesn't match: got={actual_id}, want={expected_id}"
        )


class BulkOperationTimeoutError(ShopifyClientError, asyncio.TimeoutError):
    """Raised when polling exceeds the configured deadline. Never wrapped by bulk_query."""


class BulkResultError(ShopifyClientError):
    """Raised when a COMPLETED operation reports objects but no result url."""


# Result parsing errors


class BulkParseError(ShopifyClientError):
    """Base class for structural errors while reconstructing a bulk result."""


class BulkDecodeError(BulkParseError):
    """Raised when a JSONL line can't be decoded into its target model."""

    def __init__(self, line_no: int, reason: object):
        self.line_no = line_no
        self.reason = reason
        super().__init__(f"Unmarshalling line {line_no}: {reason}")


class MissingIdentifierError(BulkParseError):
    """Raised when a nested record or attach target has no `id` field."""


class MalformedGlobalIdError(BulkParseError):
    """Raised when an `id` is not a gid://shopify/<Kind>/<number> string."""

    def __init__(self, gid: object):
        self.gid = gid
        super().__init__(f"Malformed gid=`{gid}`")


class UnknownResourceKindError(BulkParseError):
    """Raised when a nested record's kind has no registered type."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"`{kind}` not implemented type")


class ConnectionFieldMismatchError(BulkParseError):
    """Raised when a parent model doesn't declare the connection being attached."""

    def __init__(self, field_name: str, parent_type: str):
        self.field_name = field_name
        self.parent_type = parent_type
        super().__init__(
            f"Connection '{field_name}' is not defined on the parent type {parent_type}"
        )


class NestingDepthExceededError(BulkParseError):
    """Raised when connection attachment recurses past the allowed depth."""


class BulkQueryError(ShopifyClientError):
    """Raised by bulk_query, naming the stage that failed."""

    def __init__(self, stage: str, error: Exception):
        self.stage = stage
        self.error = error
        super().__init__(f"Bulk query failed at stage={stage}: {error}")


def _unwrap(err: Optional[BaseException]) -> Optional[BaseException]:
    if isinstance(err, BulkQueryError):
        return err.error
    return err


def is_rate_limit_error(err: Optional[BaseException]) -> bool:
    return isinstance(_unwrap(err), ShopifyRateLimitError)


def is_unauthorized_error(err: Optional[BaseException]) -> bool:
    return isinstance(_unwrap(err), ShopifyUnauthorizedError)


def is_not_found_error(err: Optional[BaseException]) -> bool:
    return isinstance(_unwrap(err), ShopifyNotFoundError)


def is_retryable_error(err: Optional[BaseException]) -> bool:
    """Whether a caller may retry the operation that raised `err`."""
    inner = _unwrap(err)
    if isinstance(inner, ShopifyApiError):
        return inner.retryable
    return isinstance(inner, (BulkOperationInProgressError, BulkJobLockedError))

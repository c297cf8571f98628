"""Shopify integration modules."""
from .bulk_client import ShopifyBulkClient
from .bulk_parser import BulkResultParser, ChildRecord, ConnectionSink, RootRecord
from .client import ShopifyClient
from .exceptions import (
    BulkDecodeError,
    BulkJobLockedError,
    BulkOperationCanceledError,
    BulkOperationFailedError,
    BulkOperationInProgressError,
    BulkOperationMismatchError,
    BulkOperationTimeoutError,
    BulkParseError,
    BulkQueryError,
    BulkResultError,
    ConnectionFieldMismatchError,
    MalformedGlobalIdError,
    MissingIdentifierError,
    NestingDepthExceededError,
    ShopifyApiError,
    ShopifyClientError,
    ShopifyConfigError,
    ShopifyGraphQLError,
    UnknownResourceKindError,
)
from .graphql_client import ShopifyGraphQLClient
from .type_registry import (
    DEFAULT_TYPE_REGISTRY,
    TypeRegistry,
    TypeResolutionEntry,
    parse_gid,
)

__all__ = [
    "ShopifyClient",
    "ShopifyGraphQLClient",
    "ShopifyBulkClient",
    "BulkResultParser",
    "ConnectionSink",
    "RootRecord",
    "ChildRecord",
    "TypeRegistry",
    "TypeResolutionEntry",
    "DEFAULT_TYPE_REGISTRY",
    "parse_gid",
    "ShopifyClientError",
    "ShopifyConfigError",
    "ShopifyApiError",
    "ShopifyGraphQLError",
    "BulkJobLockedError",
    "BulkOperationInProgressError",
    "BulkOperationFailedError",
    "BulkOperationCanceledError",
    "BulkOperationMismatchError",
    "BulkOperationTimeoutError",
    "BulkResultError",
    "BulkQueryError",
    "BulkParseError",
    "BulkDecodeError",
    "MalformedGlobalIdError",
    "UnknownResourceKindError",
    "MissingIdentifierError",
    "ConnectionFieldMismatchError",
    "NestingDepthExceededError",
]

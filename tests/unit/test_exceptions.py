"""Unit tests for error predicates."""
from shopql_core.shopify.exceptions import (
    BulkJobLockedError,
    BulkOperationFailedError,
    BulkQueryError,
    ShopifyGraphQLError,
    ShopifyNotFoundError,
    ShopifyRateLimitError,
    ShopifyUnauthorizedError,
    is_not_found_error,
    is_rate_limit_error,
    is_retryable_error,
    is_unauthorized_error,
)


def test_predicates_look_through_stage_wrapper():
    wrapped = BulkQueryError("submit", ShopifyRateLimitError("slow down", status=429))

    assert is_rate_limit_error(wrapped)
    assert is_retryable_error(wrapped)
    assert not is_unauthorized_error(wrapped)
    assert wrapped.stage == "submit"
    assert "stage=submit" in str(wrapped)


def test_fatal_errors_not_retryable():
    assert not is_retryable_error(ShopifyUnauthorizedError("bad token", status=401))
    assert not is_retryable_error(BulkOperationFailedError("gid://shopify/BulkOperation/1", "ACCESS_DENIED"))
    assert not is_retryable_error(ShopifyGraphQLError([{"message": "bad query"}]))
    assert not is_retryable_error(None)


def test_lock_held_is_retryable():
    assert is_retryable_error(BulkJobLockedError("shop.myshopify.com", "key"))


def test_not_found_and_unauthorized():
    assert is_not_found_error(ShopifyNotFoundError("gone", status=404))
    assert is_unauthorized_error(BulkQueryError("wait", ShopifyUnauthorizedError("no", status=401)))


def test_graphql_error_message():
    assert str(ShopifyGraphQLError("GraphQL root errors: x")) == "GraphQL root errors: x"
    assert "userErrors" in str(ShopifyGraphQLError([{"message": "bad"}]))

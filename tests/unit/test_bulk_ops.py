"""Unit tests for the BulkOperation model."""
from shopql_core.schemas.bulk_ops import BulkOperation, BulkOperationStatus


def test_from_node_converts_counts():
    operation = BulkOperation.from_node(
        {
            "id": "gid://shopify/BulkOperation/1",
            "status": "COMPLETED",
            "url": "https://example.com/r.jsonl",
            "objectCount": "42",
            "fileSize": "1024",
            "errorCode": None,
        }
    )

    assert operation.status == BulkOperationStatus.COMPLETED
    assert operation.object_count == 42
    assert operation.file_size == 1024
    assert operation.is_success
    assert operation.is_terminal
    assert not operation.is_empty


def test_bad_count_becomes_none():
    operation = BulkOperation.from_node(
        {"id": "gid://shopify/BulkOperation/1", "status": "RUNNING", "objectCount": "n/a"}
    )

    assert operation.object_count is None
    assert operation.is_active


def test_canceling_is_active_not_terminal():
    operation = BulkOperation(id="gid://shopify/BulkOperation/1", status="CANCELING")

    assert operation.is_active
    assert not operation.is_terminal


def test_completed_with_error_code_is_not_success():
    operation = BulkOperation(
        id="gid://shopify/BulkOperation/1",
        status="COMPLETED",
        error_code="ACCESS_DENIED",
        object_count=0,
    )

    assert not operation.is_success
    assert operation.is_empty

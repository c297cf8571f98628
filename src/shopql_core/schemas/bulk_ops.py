"""Pydantic models for Shopify Bulk Operations API responses."""
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class BulkOperationStatus(str, Enum):
    """Lifecycle states of a Shopify BulkOperation."""

    CREATED = "CREATED"
    RUNNING = "RUNNING"
    CANCELING = "CANCELING"
    CANCELED = "CANCELED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"


ACTIVE_STATUSES = frozenset(
    {
        BulkOperationStatus.CREATED,
        BulkOperationStatus.RUNNING,
        BulkOperationStatus.CANCELING,
    }
)

TERMINAL_STATUSES = frozenset(
    {
        BulkOperationStatus.COMPLETED,
        BulkOperationStatus.FAILED,
        BulkOperationStatus.CANCELED,
        BulkOperationStatus.EXPIRED,
    }
)


class BulkOperation(BaseModel):
    """Shopify BulkOperation response model."""

    id: str = Field(..., description="GID of bulk operation (e.g., gid://shopify/BulkOperation/123)")
    status: BulkOperationStatus = Field(
        ...,
        description="CREATED|RUNNING|COMPLETED|FAILED|CANCELING|CANCELED|EXPIRED",
    )
    url: Optional[str] = Field(
        None, description="JSONL download URL (present when COMPLETED)"
    )
    object_count: Optional[int] = Field(None, description="Number of objects processed")
    error_code: Optional[str] = Field(None, description="Error code if FAILED")
    partial_data_url: Optional[str] = Field(None, description="Partial JSONL URL if job failed mid-run")
    file_size: Optional[int] = Field(None, description="Size in bytes of the result file")
    query: Optional[str] = Field(None, description="Bulk query the operation is running")
    created_at: Optional[str] = None
    completed_at: Optional[str] = None

    @classmethod
    def from_node(cls, node: dict[str, Any]) -> "BulkOperation":
        """Build from a camelCase GraphQL BulkOperation node."""
        return cls(
            id=node["id"],
            status=node["status"],
            url=node.get("url"),
            object_count=_safe_int(node.get("objectCount")),
            error_code=node.get("errorCode"),
            partial_data_url=node.get("partialDataUrl"),
            file_size=_safe_int(node.get("fileSize")),
            query=node.get("query"),
            created_at=node.get("createdAt"),
            completed_at=node.get("completedAt"),
        )

    @property
    def is_active(self) -> bool:
        """Check if operation still occupies the shop's bulk slot."""
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        """Check if operation has reached terminal state."""
        return self.status in TERMINAL_STATUSES

    @property
    def is_success(self) -> bool:
        """Check if operation completed successfully."""
        return self.status == BulkOperationStatus.COMPLETED and not self.error_code

    @property
    def is_empty(self) -> bool:
        """Completed with nothing exported."""
        return self.status == BulkOperationStatus.COMPLETED and self.object_count == 0


def _safe_int(value) -> Optional[int]:
    """Safely convert value to int or None."""
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None

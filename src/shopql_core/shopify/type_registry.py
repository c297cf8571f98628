"""Resource kind registry used to type nested bulk result records.

A nested JSONL record only tells us its own global id
(`gid://shopify/ProductVariant/9`) and its parent's id. The kind embedded in
the gid decides which model the line decodes into, which edge wraps it, and
which connection field of the parent it belongs to.
"""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from pydantic import BaseModel

from ..schemas import models
from .exceptions import MalformedGlobalIdError, UnknownResourceKindError


GID_PATTERN = re.compile(r"^gid://shopify/(\w+)/(\d+)$")


@dataclass(frozen=True)
class TypeResolutionEntry:
    """How to decode and attach one resource kind."""

    kind: str
    node_type: type[BaseModel]
    edge_type: type[BaseModel]
    connection_type: type[BaseModel]
    field_name: str


def parse_gid(gid: object) -> tuple[str, int]:
    """Split a global id into (kind, numeric id)."""
    if not isinstance(gid, str):
        raise MalformedGlobalIdError(gid)
    match = GID_PATTERN.match(gid)
    if match is None:
        raise MalformedGlobalIdError(gid)
    return match.group(1), int(match.group(2))


class TypeRegistry:
    """Read-only mapping of resource kind -> TypeResolutionEntry."""

    def __init__(self, entries: Iterable[TypeResolutionEntry]):
        table = {}
        for entry in entries:
            table[entry.kind] = entry
        self._entries: Mapping[str, TypeResolutionEntry] = MappingProxyType(table)

    def __contains__(self, kind: object) -> bool:
        return kind in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def kinds(self) -> list[str]:
        return sorted(self._entries)

    def get(self, kind: str) -> TypeResolutionEntry:
        try:
            return self._entries[kind]
        except KeyError:
            raise UnknownResourceKindError(kind) from None

    def resolve(self, gid: object) -> TypeResolutionEntry:
        """Resolve the entry for a record's global id."""
        kind, _ = parse_gid(gid)
        return self.get(kind)

    def extend(self, *entries: TypeResolutionEntry) -> "TypeRegistry":
        """Return a new registry with `entries` added or overriding."""
        return TypeRegistry([*self._entries.values(), *entries])


DEFAULT_TYPE_REGISTRY = TypeRegistry(
    [
        TypeResolutionEntry(
            "LineItem", models.LineItem, models.LineItemEdge,
            models.LineItemConnection, "line_items",
        ),
        # Fulfillment order line items live under `lineItems`, not `fulfillmentOrderLineItems`
        TypeResolutionEntry(
            "FulfillmentOrderLineItem", models.FulfillmentOrderLineItem,
            models.FulfillmentOrderLineItemEdge,
            models.FulfillmentOrderLineItemConnection, "line_items",
        ),
        TypeResolutionEntry(
            "FulfillmentOrder", models.FulfillmentOrder, models.FulfillmentOrderEdge,
            models.FulfillmentOrderConnection, "fulfillment_orders",
        ),
        TypeResolutionEntry(
            "MediaImage", models.MediaImage, models.MediaEdge,
            models.MediaConnection, "media",
        ),
        TypeResolutionEntry(
            "Video", models.Video, models.MediaEdge,
            models.MediaConnection, "media",
        ),
        TypeResolutionEntry(
            "Model3d", models.Model3d, models.MediaEdge,
            models.MediaConnection, "media",
        ),
        TypeResolutionEntry(
            "ExternalVideo", models.ExternalVideo, models.MediaEdge,
            models.MediaConnection, "media",
        ),
        TypeResolutionEntry(
            "Metafield", models.Metafield, models.MetafieldEdge,
            models.MetafieldConnection, "metafields",
        ),
        TypeResolutionEntry(
            "Order", models.Order, models.OrderEdge,
            models.OrderConnection, "orders",
        ),
        TypeResolutionEntry(
            "Product", models.Product, models.ProductEdge,
            models.ProductConnection, "products",
        ),
        TypeResolutionEntry(
            "ProductVariant", models.ProductVariant, models.ProductVariantEdge,
            models.ProductVariantConnection, "variants",
        ),
        TypeResolutionEntry(
            "Collection", models.Collection, models.CollectionEdge,
            models.CollectionConnection, "collections",
        ),
        TypeResolutionEntry(
            "ProductImage", models.Image, models.ImageEdge,
            models.ImageConnection, "images",
        ),
    ]
)

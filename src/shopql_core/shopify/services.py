"""Bulk-backed resource listings."""
from __future__ import annotations

from ..schemas.models import Collection, Metafield, Product
from .bulk_client import ShopifyBulkClient
from .graphql_strings import (
    COLLECTION_BULK_FIELDS,
    COLLECTION_WITH_PRODUCTS_BULK_FIELDS,
    METAFIELD_BULK_FIELDS,
    PRODUCT_BULK_FIELDS,
)


def _search_arg(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace('"', '\\"')
    return f'(query: "{escaped}")'


def _connection_query(root: str, fields: str, args: str = "") -> str:
    return f"""
{{
  {root}{args} {{
    edges {{
      node {{
{fields}
      }}
    }}
  }}
}}
"""


class ProductService:
    """Products with their variants and media."""

    def __init__(self, bulk: ShopifyBulkClient):
        self.bulk = bulk

    async def list_all(self) -> list[Product]:
        return await self.bulk.bulk_query(
            _connection_query("products", PRODUCT_BULK_FIELDS), Product
        )

    async def list(self, search: str) -> list[Product]:
        """Products matching a Shopify search query, e.g. `status:active`."""
        return await self.bulk.bulk_query(
            _connection_query("products", PRODUCT_BULK_FIELDS, _search_arg(search)),
            Product,
        )


class CollectionService:
    def __init__(self, bulk: ShopifyBulkClient):
        self.bulk = bulk

    async def list_all(self) -> list[Collection]:
        return await self.bulk.bulk_query(
            _connection_query("collections", COLLECTION_BULK_FIELDS), Collection
        )

    async def list(self, search: str) -> list[Collection]:
        """Matching collections, each with its products attached."""
        return await self.bulk.bulk_query(
            _connection_query(
                "collections", COLLECTION_WITH_PRODUCTS_BULK_FIELDS, _search_arg(search)
            ),
            Collection,
        )


class MetafieldService:
    def __init__(self, bulk: ShopifyBulkClient):
        self.bulk = bulk

    async def list_all_shop_metafields(self) -> list[Metafield]:
        return await self.bulk.bulk_query(self._shop_metafields_query(""), Metafield)

    async def list_shop_metafields_by_namespace(self, namespace: str) -> list[Metafield]:
        escaped = namespace.replace("\\", "\\\\").replace('"', '\\"')
        return await self.bulk.bulk_query(
            self._shop_metafields_query(f'(namespace: "{escaped}")'), Metafield
        )

    @staticmethod
    def _shop_metafields_query(args: str) -> str:
        return f"""
{{
  shop {{
    metafields{args} {{
      edges {{
        node {{
{METAFIELD_BULK_FIELDS}
        }}
      }}
    }}
  }}
}}
"""

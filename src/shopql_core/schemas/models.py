"""Typed Shopify Admin resource models, edges and connections.

Models accept the camelCase field names Shopify returns and expose
snake_case attributes. Every connection (`products`, `variants`, `media`,
...) is a `*Connection` model holding a list of `*Edge` models, each
wrapping one node, mirroring the GraphQL shape so that bulk results and
paginated results decode into the same types.
"""
from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ShopifyModel(BaseModel):
    """Base model: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class PageInfo(ShopifyModel):
    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None


class SEO(ShopifyModel):
    title: Optional[str] = None
    description: Optional[str] = None


class MoneyV2(ShopifyModel):
    amount: Optional[str] = None
    currency_code: Optional[str] = None


class MoneyBag(ShopifyModel):
    shop_money: Optional[MoneyV2] = None
    presentment_money: Optional[MoneyV2] = None


class ProductPriceRange(ShopifyModel):
    min_variant_price: Optional[MoneyV2] = None
    max_variant_price: Optional[MoneyV2] = None


class SelectedOption(ShopifyModel):
    name: str
    value: str


class ProductOption(ShopifyModel):
    id: Optional[str] = None
    name: Optional[str] = None
    position: Optional[int] = None
    values: list[str] = Field(default_factory=list)


class Image(ShopifyModel):
    id: Optional[str] = None
    alt_text: Optional[str] = None
    src: Optional[str] = None
    url: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class MediaPreviewImage(ShopifyModel):
    image: Optional[Image] = None


class MediaSource(ShopifyModel):
    url: Optional[str] = None
    format: Optional[str] = None
    mime_type: Optional[str] = None
    filesize: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None


# Nodes


class Metafield(ShopifyModel):
    id: str
    legacy_resource_id: Optional[str] = None
    namespace: Optional[str] = None
    key: Optional[str] = None
    value: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    owner_type: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class MediaImage(ShopifyModel):
    id: str
    typename: Optional[str] = Field(None, alias="__typename")
    media_content_type: Optional[str] = None
    alt: Optional[str] = None
    mime_type: Optional[str] = None
    status: Optional[str] = None
    image: Optional[Image] = None
    preview: Optional[MediaPreviewImage] = None


class Video(ShopifyModel):
    id: str
    typename: Optional[str] = Field(None, alias="__typename")
    media_content_type: Optional[str] = None
    alt: Optional[str] = None
    duration: Optional[int] = None
    status: Optional[str] = None
    original_source: Optional[MediaSource] = None
    sources: list[MediaSource] = Field(default_factory=list)
    preview: Optional[MediaPreviewImage] = None


class Model3d(ShopifyModel):
    id: str
    typename: Optional[str] = Field(None, alias="__typename")
    media_content_type: Optional[str] = None
    alt: Optional[str] = None
    status: Optional[str] = None
    original_source: Optional[MediaSource] = None
    sources: list[MediaSource] = Field(default_factory=list)
    preview: Optional[MediaPreviewImage] = None


class ExternalVideo(ShopifyModel):
    id: str
    typename: Optional[str] = Field(None, alias="__typename")
    media_content_type: Optional[str] = None
    alt: Optional[str] = None
    host: Optional[str] = None
    origin_url: Optional[str] = None
    embed_url: Optional[str] = None
    status: Optional[str] = None
    preview: Optional[MediaPreviewImage] = None


Media = Union[MediaImage, Video, Model3d, ExternalVideo]


class ProductVariant(ShopifyModel):
    id: str
    legacy_resource_id: Optional[str] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    price: Optional[str] = None
    compare_at_price: Optional[str] = None
    position: Optional[int] = None
    inventory_quantity: Optional[int] = None
    inventory_policy: Optional[str] = None
    selected_options: list[SelectedOption] = Field(default_factory=list)
    image: Optional[Image] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    metafields: Optional[MetafieldConnection] = None
    media: Optional[MediaConnection] = None


class Product(ShopifyModel):
    id: str
    legacy_resource_id: Optional[str] = None
    handle: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    description_html: Optional[str] = None
    product_type: Optional[str] = None
    vendor: Optional[str] = None
    status: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    options: list[ProductOption] = Field(default_factory=list)
    price_range_v2: Optional[ProductPriceRange] = Field(None, alias="priceRangeV2")
    seo: Optional[SEO] = None
    template_suffix: Optional[str] = None
    online_store_url: Optional[str] = None
    total_inventory: Optional[int] = None
    tracks_inventory: Optional[bool] = None
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    variants: Optional[ProductVariantConnection] = None
    media: Optional[MediaConnection] = None
    images: Optional[ImageConnection] = None
    metafields: Optional[MetafieldConnection] = None
    collections: Optional[CollectionConnection] = None


class Collection(ShopifyModel):
    id: str
    legacy_resource_id: Optional[str] = None
    handle: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    description_html: Optional[str] = None
    template_suffix: Optional[str] = None
    products_count: Optional[Union[int, dict]] = None
    seo: Optional[SEO] = None
    image: Optional[Image] = None
    updated_at: Optional[str] = None
    products: Optional[ProductConnection] = None
    metafields: Optional[MetafieldConnection] = None


class LineItem(ShopifyModel):
    id: str
    name: Optional[str] = None
    title: Optional[str] = None
    sku: Optional[str] = None
    quantity: Optional[int] = None
    variant: Optional[ProductVariant] = None
    original_total_set: Optional[MoneyBag] = None


class FulfillmentOrderLineItem(ShopifyModel):
    id: str
    total_quantity: Optional[int] = None
    remaining_quantity: Optional[int] = None
    line_item: Optional[LineItem] = None


class FulfillmentOrder(ShopifyModel):
    id: str
    status: Optional[str] = None
    request_status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    line_items: Optional[FulfillmentOrderLineItemConnection] = None


class Order(ShopifyModel):
    id: str
    legacy_resource_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    display_financial_status: Optional[str] = None
    display_fulfillment_status: Optional[str] = None
    total_price_set: Optional[MoneyBag] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    line_items: Optional[LineItemConnection] = None
    fulfillment_orders: Optional[FulfillmentOrderConnection] = None
    metafields: Optional[MetafieldConnection] = None


# Edges


class MetafieldEdge(ShopifyModel):
    node: Metafield
    cursor: Optional[str] = None


class MediaEdge(ShopifyModel):
    node: Media
    cursor: Optional[str] = None


class ImageEdge(ShopifyModel):
    node: Image
    cursor: Optional[str] = None


class ProductVariantEdge(ShopifyModel):
    node: ProductVariant
    cursor: Optional[str] = None


class ProductEdge(ShopifyModel):
    node: Product
    cursor: Optional[str] = None


class CollectionEdge(ShopifyModel):
    node: Collection
    cursor: Optional[str] = None


class LineItemEdge(ShopifyModel):
    node: LineItem
    cursor: Optional[str] = None


class FulfillmentOrderLineItemEdge(ShopifyModel):
    node: FulfillmentOrderLineItem
    cursor: Optional[str] = None


class FulfillmentOrderEdge(ShopifyModel):
    node: FulfillmentOrder
    cursor: Optional[str] = None


class OrderEdge(ShopifyModel):
    node: Order
    cursor: Optional[str] = None


# Connections


class MetafieldConnection(ShopifyModel):
    edges: list[MetafieldEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class MediaConnection(ShopifyModel):
    edges: list[MediaEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class ImageConnection(ShopifyModel):
    edges: list[ImageEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class ProductVariantConnection(ShopifyModel):
    edges: list[ProductVariantEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class ProductConnection(ShopifyModel):
    edges: list[ProductEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class CollectionConnection(ShopifyModel):
    edges: list[CollectionEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class LineItemConnection(ShopifyModel):
    edges: list[LineItemEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class FulfillmentOrderLineItemConnection(ShopifyModel):
    edges: list[FulfillmentOrderLineItemEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class FulfillmentOrderConnection(ShopifyModel):
    edges: list[FulfillmentOrderEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


class OrderConnection(ShopifyModel):
    edges: list[OrderEdge] = Field(default_factory=list)
    page_info: Optional[PageInfo] = None


for _model in list(globals().values()):
    if isinstance(_model, type) and issubclass(_model, ShopifyModel):
        _model.model_rebuild()

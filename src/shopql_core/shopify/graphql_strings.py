"""Canonical GraphQL query/mutation strings for Shopify Admin API."""

# Bulk Query Operations
MUTATION_BULK_RUN_QUERY = """
mutation BulkRunQuery($query: String!) {
  bulkOperationRunQuery(query: $query) {
    bulkOperation {
      id
      status
    }
    userErrors {
      field
      message
    }
  }
}
"""

BULK_OPERATION_FIELDS = """
      id
      status
      errorCode
      objectCount
      fileSize
      url
      partialDataUrl
      query
      createdAt
      completedAt
"""

QUERY_BULK_OP_BY_ID = (
    """
query BulkOpById($id: ID!) {
  node(id: $id) {
    ... on BulkOperation {
"""
    + BULK_OPERATION_FIELDS
    + """
    }
  }
}
"""
)

QUERY_CURRENT_BULK_OP = (
    """
query CurrentBulkOp {
  currentBulkOperation(type: QUERY) {
"""
    + BULK_OPERATION_FIELDS
    + """
  }
}
"""
)

MUTATION_BULK_CANCEL = """
mutation BulkCancel($id: ID!) {
  bulkOperationCancel(id: $id) {
    bulkOperation {
      id
      status
    }
    userErrors {
      field
      message
    }
  }
}
"""

# Bulk field sets used by the resource services
PRODUCT_BULK_FIELDS = """
        id
        legacyResourceId
        handle
        status
        publishedAt
        createdAt
        updatedAt
        tracksInventory
        tags
        title
        description
        descriptionHtml
        productType
        vendor
        totalInventory
        onlineStoreUrl
        templateSuffix
        options {
          id
          name
          position
          values
        }
        priceRangeV2 {
          minVariantPrice { amount currencyCode }
          maxVariantPrice { amount currencyCode }
        }
        seo { title description }
        media {
          edges {
            node {
              __typename
              mediaContentType
              ... on MediaImage {
                id
                alt
                mimeType
                image { height src width }
              }
              ... on Model3d {
                id
                alt
                originalSource { url format filesize mimeType }
                preview { image { src } }
              }
              ... on Video {
                id
                alt
                duration
                originalSource { url format mimeType height width }
                preview { image { src } }
              }
              ... on ExternalVideo {
                id
                originUrl
                embedUrl
                preview { image { src } }
              }
            }
          }
        }
        variants {
          edges {
            node {
              id
              legacyResourceId
              createdAt
              updatedAt
              sku
              barcode
              title
              price
              compareAtPrice
              position
              inventoryQuantity
              inventoryPolicy
              selectedOptions { name value }
              image { altText height id src width }
            }
          }
        }
"""

COLLECTION_BULK_FIELDS = """
        id
        legacyResourceId
        handle
        title
        updatedAt
        description
        descriptionHtml
        templateSuffix
        seo { title description }
        image { altText height id src width }
"""

COLLECTION_WITH_PRODUCTS_BULK_FIELDS = (
    COLLECTION_BULK_FIELDS
    + """
        products {
          edges {
            node {
              id
              handle
              title
            }
          }
        }
"""
)

METAFIELD_BULK_FIELDS = """
              id
              legacyResourceId
              namespace
              key
              value
              type
              description
              ownerType
              createdAt
              updatedAt
"""

"""shopql core: async Shopify GraphQL client with bulk query reconstruction."""

"""GraphQL documents sent to the Shopify Admin API."""

PRODUCT_FIELDS = """
fragment MediaFields on Media {
  mediaContentType
  alt
  preview {
    image {
      url
      altText
    }
  }
  ... on MediaImage {
    image {
      url
      altText
    }
  }
}

fragment VariantFields on ProductVariant {
  id
  title
  price
  sku
  availableForSale
  inventoryQuantity
  selectedOptions {
    name
    value
  }
}

fragment ProductFields on Product {
  id
  title
  description
  handle
  productType
  vendor
  tags
  updatedAt
  featuredMedia {
    ...MediaFields
  }
  media(first: 10) {
    nodes {
      ...MediaFields
    }
  }
  priceRangeV2 {
    minVariantPrice {
      amount
      currencyCode
    }
    maxVariantPrice {
      amount
      currencyCode
    }
  }
  variantsCount {
    count
  }
}
"""

PRODUCTS_COUNT_QUERY = """
query productsCount($query: String) {
  productsCount(query: $query) {
    count
  }
}
"""

PRODUCT_CURSORS_QUERY = """
query productCursors(
  $first: Int!
  $after: String
  $query: String
  $sortKey: ProductSortKeys
  $reverse: Boolean
) {
  products(first: $first, after: $after, query: $query, sortKey: $sortKey, reverse: $reverse) {
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

PRODUCTS_PAGE_QUERY = (
    PRODUCT_FIELDS
    + """
query productsPage(
  $first: Int!
  $after: String
  $query: String
  $sortKey: ProductSortKeys
  $reverse: Boolean
  $variantsFirst: Int!
) {
  products(first: $first, after: $after, query: $query, sortKey: $sortKey, reverse: $reverse) {
    nodes {
      ...ProductFields
      variants(first: $variantsFirst) {
        nodes {
          ...VariantFields
        }
        pageInfo {
          hasNextPage
          endCursor
        }
      }
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""
)

PRODUCT_DETAIL_QUERY = (
    PRODUCT_FIELDS
    + """
query productDetail($id: ID!, $variantsFirst: Int!) {
  product(id: $id) {
    ...ProductFields
    variants(first: $variantsFirst) {
      nodes {
        ...VariantFields
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""
)

PRODUCT_VARIANTS_QUERY = """
fragment VariantFields on ProductVariant {
  id
  title
  price
  sku
  availableForSale
  inventoryQuantity
  selectedOptions {
    name
    value
  }
}

query productVariants($id: ID!, $first: Int!, $after: String) {
  product(id: $id) {
    variants(first: $first, after: $after) {
      nodes {
        ...VariantFields
      }
      pageInfo {
        hasNextPage
        endCursor
      }
    }
  }
}
"""

LOCATIONS_QUERY = """
query locations($first: Int!, $after: String) {
  locations(first: $first, after: $after) {
    nodes {
      id
      name
      isActive
      fulfillsOnlineOrders
    }
    pageInfo {
      hasNextPage
      endCursor
    }
  }
}
"""

SHOP_QUERY = """
query shop {
  shop {
    id
    name
    email
  }
}
"""

PRODUCT_SET_MUTATION = """
mutation productSet($input: ProductSetInput!, $synchronous: Boolean!) {
  productSet(input: $input, synchronous: $synchronous) {
    product {
      id
    }
    productSetOperation {
      id
      status
      product {
        id
      }
      userErrors {
        field
        message
        code
      }
    }
    userErrors {
      field
      message
      code
    }
  }
}
"""

PRODUCT_OPERATION_QUERY = """
query productOperation($id: ID!) {
  productOperation(id: $id) {
    ... on ProductSetOperation {
      id
      status
      product {
        id
      }
      userErrors {
        field
        message
        code
      }
    }
  }
}
"""

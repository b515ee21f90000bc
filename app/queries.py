"""GraphQL documents sent to the Shopify Admin API."""

PAGE_SIZE = 5

QUERY_GET_PRODUCTS = """
query getProducts($first: Int!, $after: String) {
  products(first: $first, after: $after) {
    edges {
      cursor
      node {
        id
        title
        handle
        status
        images(first: 1) {
          edges {
            node {
              originalSrc
              altText
            }
          }
        }
        variants(first: 1) {
          edges {
            node {
              id
              price
              barcode
            }
          }
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

MUTATION_UPDATE_PRODUCT = """
mutation updateProduct($input: ProductInput!) {
  productUpdate(input: $input) {
    product {
      id
      title
      status
      tags
    }
    userErrors {
      field
      message
    }
  }
}
"""

MUTATION_DELETE_PRODUCT = """
mutation deleteProduct($input: ProductDeleteInput!) {
  productDelete(input: $input) {
    deletedProductId
    userErrors {
      field
      message
    }
  }
}
"""

import logging
from typing import Any, Dict, Optional, Tuple

from .core import (
    DeleteProductIn, UpdateProductIn, list_body, mutation_payload,
    unwrap_products, user_errors
)
from .models import ListOutcome, OutcomeKind
from .queries import (
    PAGE_SIZE, QUERY_GET_PRODUCTS, MUTATION_UPDATE_PRODUCT, MUTATION_DELETE_PRODUCT
)
from .upstream import AdminGraphQL, UpstreamError

logger = logging.getLogger(__name__)

# This file contains the core logic for the product endpoints. Every function
# makes exactly one upstream call and answers with (status_code, body).

Result = Tuple[int, Dict[str, Any]]

GENERIC_ERROR = "Upstream request failed"

def _error_message(exc: Exception, expose: bool) -> str:
    if not expose:
        return GENERIC_ERROR
    return str(exc) or type(exc).__name__

def _failure(exc: Exception, expose: bool) -> Result:
    return 500, {"success": False, "error": _error_message(exc, expose)}

# Listing
async def fetch_products(client: AdminGraphQL, after: Optional[str] = None,
                         expose_errors: bool = True) -> ListOutcome:
    try:
        body = await client.graphql(QUERY_GET_PRODUCTS, {"first": PAGE_SIZE, "after": after})
        return unwrap_products(body)
    except Exception as exc:
        logger.exception("GraphQL error while listing products (after=%s)", after)
        return ListOutcome(kind=OutcomeKind.FAILED, error=_error_message(exc, expose_errors))

async def list_products_logic(client: AdminGraphQL, after: Optional[str] = None,
                              expose_errors: bool = True) -> Result:
    outcome = await fetch_products(client, after, expose_errors)
    return (500 if outcome.failed else 200), list_body(outcome)

# Update
async def update_product_logic(client: AdminGraphQL, payload: UpdateProductIn,
                               expose_errors: bool = True) -> Result:
    try:
        body = await client.graphql(MUTATION_UPDATE_PRODUCT, {"input": payload.to_input()})
        result = mutation_payload(body, "productUpdate")
        errors = user_errors(result)
        if not errors and result.get("product") is None:
            raise UpstreamError("upstream returned no product")
    except Exception as exc:
        logger.exception("Error updating product %s", payload.id)
        return _failure(exc, expose_errors)

    if errors:
        logger.warning("Shopify userErrors while updating %s: %s", payload.id, errors)
        return 400, {"success": False, "errors": errors}

    return 200, {"success": True, "updatedProduct": result["product"]}

# Delete
async def delete_product_logic(client: AdminGraphQL, payload: DeleteProductIn,
                               expose_errors: bool = True) -> Result:
    try:
        body = await client.graphql(MUTATION_DELETE_PRODUCT, {"input": {"id": payload.id}})
        result = mutation_payload(body, "productDelete")
        errors = user_errors(result)
        if not errors and not result.get("deletedProductId"):
            raise UpstreamError("upstream returned no deleted product id")
    except Exception as exc:
        logger.exception("Error deleting product %s", payload.id)
        return _failure(exc, expose_errors)

    if errors:
        logger.warning("Shopify userErrors while deleting %s: %s", payload.id, errors)
        return 400, {"success": False, "errors": errors}

    return 200, {"success": True, "deletedId": result["deletedProductId"]}

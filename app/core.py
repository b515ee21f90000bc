from pydantic import BaseModel
from typing import Optional, Dict, Any, List

from .models import ListOutcome, OutcomeKind, PageInfo, Product, ProductImage, ProductVariant
from .upstream import UpstreamError

# Fields go upstream exactly as sent; the shop validates them.
class UpdateProductIn(BaseModel):
    id: Any
    title: Any = None
    status: Any = None
    tags: Any = None

    def to_input(self) -> Dict[str, Any]:
        # fields the caller left out are not sent, so upstream keeps their values
        return self.model_dump(exclude_none=True)

class DeleteProductIn(BaseModel):
    id: Any

# ---------------------------
# Response unwrapping
# ---------------------------
def raise_for_graphql_errors(body: Any) -> None:
    if not isinstance(body, dict):
        raise UpstreamError(f"unexpected upstream response: {type(body).__name__}")
    errors = body.get("errors")
    if isinstance(errors, str):
        raise UpstreamError(errors)
    if isinstance(errors, dict):
        errors = [errors]
    if errors:
        messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
        raise UpstreamError("; ".join(messages))

def _first_node(connection: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    edges = (connection or {}).get("edges") or []
    if not edges:
        return None
    return edges[0].get("node")

def _make_product(node: Dict[str, Any]) -> Product:
    image = _first_node(node.get("images"))
    variant = _first_node(node.get("variants"))
    return Product(
        id=node["id"],
        title=node.get("title") or "",
        handle=node.get("handle"),
        status=node.get("status") or "DRAFT",
        image=ProductImage(url=image["originalSrc"], alt_text=image.get("altText"))
        if image and image.get("originalSrc") else None,
        variant=ProductVariant(
            id=variant["id"],
            price=variant.get("price"),
            barcode=variant.get("barcode"),
        ) if variant else None,
    )

def unwrap_products(body: Any) -> ListOutcome:
    """Turn a getProducts response into an ok/empty outcome.

    Raises UpstreamError when the response carries GraphQL errors or has no
    products connection at all; a missing connection is not "no results".
    """
    raise_for_graphql_errors(body)
    connection = (body.get("data") or {}).get("products")
    if not isinstance(connection, dict):
        raise UpstreamError("upstream response has no products connection")

    products = [_make_product(edge["node"]) for edge in connection.get("edges") or []]
    page_info = PageInfo(**(connection.get("pageInfo") or {}))
    kind = OutcomeKind.OK if products else OutcomeKind.EMPTY
    return ListOutcome(kind=kind, products=products, page_info=page_info)

def mutation_payload(body: Any, name: str) -> Dict[str, Any]:
    raise_for_graphql_errors(body)
    payload = (body.get("data") or {}).get(name)
    if not isinstance(payload, dict):
        raise UpstreamError(f"upstream response has no {name} payload")
    return payload

def user_errors(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    # passed through exactly as upstream sent them
    return payload.get("userErrors") or []

def list_body(outcome: ListOutcome) -> Dict[str, Any]:
    if outcome.failed:
        return {
            "success": False,
            "outcome": outcome.kind.value,
            "products": [],
            "pageInfo": {},
            "error": outcome.error,
        }
    return {
        "success": True,
        "outcome": outcome.kind.value,
        "products": [p.model_dump(mode="json", by_alias=True) for p in outcome.products],
        "pageInfo": outcome.page_info.model_dump(mode="json", by_alias=True),
    }

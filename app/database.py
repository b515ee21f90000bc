import base64
import copy
import json
import re
from typing import Any, Callable, Dict, List, Optional

from .models import ProductStatus

# This file holds the in-memory product catalog that stands in for a shop
# when no credentials are configured. It answers the same three GraphQL
# operations the routes send, with the same response envelopes.

_OPERATION_RE = re.compile(r"\b(?:query|mutation)\s+(\w+)")
_STATUSES = {s.value for s in ProductStatus}


def _numeric_id(gid: str) -> int:
    return int(gid.rsplit("/", 1)[-1])


def _slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def _encode_cursor(last_id: int) -> str:
    raw = json.dumps({"last_id": last_id}).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _decode_cursor(cursor: str) -> Optional[int]:
    try:
        decoded = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
        last_id = decoded["last_id"]
    except (ValueError, KeyError, TypeError):
        return None
    return last_id if isinstance(last_id, int) else None


def _graphql_error(message: str) -> Dict[str, Any]:
    return {"errors": [{"message": message}]}


def _missing_product() -> List[Dict[str, Any]]:
    return [{"field": ["id"], "message": "Product does not exist"}]


def make_product(
    num: int,
    title: str,
    status: str = "ACTIVE",
    price: str = "0.00",
    barcode: Optional[str] = None,
    image_url: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build a product record in the upstream node shape."""
    image_edges = []
    if image_url:
        image_edges.append({"node": {"originalSrc": image_url, "altText": title}})
    return {
        "id": f"gid://shopify/Product/{num}",
        "title": title,
        "handle": _slugify(title),
        "status": status,
        "tags": list(tags or []),
        "images": {"edges": image_edges},
        "variants": {
            "edges": [
                {
                    "node": {
                        "id": f"gid://shopify/ProductVariant/{num}01",
                        "price": price,
                        "barcode": barcode,
                    }
                }
            ]
        },
    }


def seed_products() -> List[Dict[str, Any]]:
    cdn = "https://cdn.shopify.com/s/files/1/0000/0001/products"
    return [
        make_product(101, "Classic Cotton Tee", "ACTIVE", "499.00", "8901234500011", f"{cdn}/tee.jpg", ["apparel"]),
        make_product(102, "Denim Jacket", "ACTIVE", "2499.00", "8901234500028", f"{cdn}/jacket.jpg", ["apparel"]),
        make_product(103, "Canvas Sneakers", "DRAFT", "1799.00", None, f"{cdn}/sneakers.jpg", ["footwear"]),
        make_product(104, "Leather Belt", "ACTIVE", "899.00", "8901234500042"),
        make_product(105, "Wool Beanie", "ARCHIVED", "349.00", None, f"{cdn}/beanie.jpg"),
        make_product(106, "Steel Water Bottle", "ACTIVE", "649.00", "8901234500066", f"{cdn}/bottle.jpg", ["kitchen"]),
        make_product(107, "Ceramic Mug", "ACTIVE", "299.00", "8901234500073"),
        make_product(108, "Bamboo Cutting Board", "DRAFT", "799.00", None, f"{cdn}/board.jpg", ["kitchen"]),
        make_product(109, "Linen Apron", "ACTIVE", "599.00", None),
        make_product(110, "Scented Candle", "ACTIVE", "449.00", "8901234500103", f"{cdn}/candle.jpg"),
        make_product(111, "Desk Organizer", "ARCHIVED", "999.00", None),
        make_product(112, "Travel Backpack", "ACTIVE", "3299.00", "8901234500127", f"{cdn}/backpack.jpg", ["bags"]),
    ]


class MemoryAdminClient:
    """In-memory stand-in for the Shopify Admin GraphQL endpoint."""

    def __init__(self, products: Optional[List[Dict[str, Any]]] = None):
        seed = seed_products() if products is None else products
        self.products: Dict[str, Dict[str, Any]] = {p["id"]: copy.deepcopy(p) for p in seed}
        self._operations: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "getProducts": self._get_products,
            "updateProduct": self._update_product,
            "deleteProduct": self._delete_product,
        }

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        match = _OPERATION_RE.search(query)
        operation = self._operations.get(match.group(1)) if match else None
        if operation is None:
            return _graphql_error("Unsupported operation")
        return operation(variables or {})

    async def aclose(self) -> None:
        return None

    # ---------------------------
    # Operations
    # ---------------------------
    def _get_products(self, variables: Dict[str, Any]) -> Dict[str, Any]:
        first = variables.get("first")
        if not first:
            return _graphql_error("you must provide one of first or last")

        ordered = sorted(self.products.values(), key=lambda p: _numeric_id(p["id"]))
        after = variables.get("after")
        if after is not None:
            last_id = _decode_cursor(after)
            if last_id is None:
                return _graphql_error("Invalid cursor for current pagination sort.")
            ordered = [p for p in ordered if _numeric_id(p["id"]) > last_id]

        page = ordered[:first]
        edges = [
            {
                "cursor": _encode_cursor(_numeric_id(p["id"])),
                "node": {k: copy.deepcopy(v) for k, v in p.items() if k != "tags"},
            }
            for p in page
        ]
        return {
            "data": {
                "products": {
                    "edges": edges,
                    "pageInfo": {
                        "hasNextPage": len(ordered) > first,
                        "endCursor": edges[-1]["cursor"] if edges else None,
                    },
                }
            }
        }

    def _update_product(self, variables: Dict[str, Any]) -> Dict[str, Any]:
        fields = dict(variables.get("input") or {})
        status = fields.get("status")
        if status is not None and status not in _STATUSES:
            # enum coercion fails before the mutation runs
            return _graphql_error(
                f"Variable $input of type ProductInput! was provided invalid value for status "
                f"(Expected \"{status}\" to be one of: ACTIVE, ARCHIVED, DRAFT)"
            )

        product = self.products.get(fields.get("id"))
        if product is None:
            return {"data": {"productUpdate": {"product": None, "userErrors": _missing_product()}}}
        if "title" in fields and not str(fields["title"]).strip():
            errors = [{"field": ["title"], "message": "Title can't be blank"}]
            return {"data": {"productUpdate": {"product": None, "userErrors": errors}}}

        for key in ("title", "status", "tags"):
            if key in fields:
                product[key] = copy.deepcopy(fields[key])

        updated = {k: copy.deepcopy(product[k]) for k in ("id", "title", "status", "tags")}
        return {"data": {"productUpdate": {"product": updated, "userErrors": []}}}

    def _delete_product(self, variables: Dict[str, Any]) -> Dict[str, Any]:
        product_id = (variables.get("input") or {}).get("id")
        if product_id not in self.products:
            return {"data": {"productDelete": {"deletedProductId": None, "userErrors": _missing_product()}}}

        del self.products[product_id]
        return {"data": {"productDelete": {"deletedProductId": product_id, "userErrors": []}}}

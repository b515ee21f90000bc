# sdk/pyadmin.py
import requests
from typing import Any, Dict, List, Optional


class ProductsClient:
    """Talks to the admin panel's /api/products routes.

    Error statuses are not raised: 400 and 500 bodies carry ``success: false``
    plus the error details, and callers branch on that.
    """

    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def _decode(self, r: requests.Response) -> Dict[str, Any]:
        try:
            return r.json()
        except ValueError:
            return {"success": False, "error": f"HTTP {r.status_code}: {r.text[:200]}"}

    # Listing / pagination
    def list_products(self, after: Optional[str] = None) -> Dict[str, Any]:
        params = {}
        if after:
            params["after"] = after
        r = self.session.get(f"{self.base_url}/api/products", params=params, timeout=self.timeout)
        return self._decode(r)

    # Mutations
    def update_product(self, product_id: str, title: Optional[str] = None,
                       status: Optional[str] = None, tags: Optional[List[str]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": product_id}
        if title is not None:
            payload["title"] = title
        if status is not None:
            payload["status"] = status
        if tags is not None:
            payload["tags"] = list(tags)
        r = self.session.post(f"{self.base_url}/api/products/update", json=payload, timeout=self.timeout)
        return self._decode(r)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/api/products/delete", json={"id": product_id}, timeout=self.timeout)
        return self._decode(r)

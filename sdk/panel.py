"""
Presentation state for the products admin panel.

``ProductsPanel`` holds what the screen shows (the loaded products, the
pagination cursor, which modal is open, the in-flight flags, the last
notice/error) and moves between states on user actions and on the
responses from ``ProductsClient``. Rendering is left to the caller.

Update modal:  CLOSED -> EDITING -> SAVING -> CLOSED (back to EDITING on failure)
Delete modal:  CLOSED -> CONFIRMING -> DELETING -> CLOSED
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from .pyadmin import ProductsClient

logger = logging.getLogger(__name__)

UPDATE_NOTICE = "Product updated successfully!"
EDITABLE_FIELDS = ("title", "status", "tags")


class ModalState(str, Enum):
    CLOSED = "closed"
    EDITING = "editing"
    SAVING = "saving"
    CONFIRMING = "confirming"
    DELETING = "deleting"


def _format_user_error(error: Any) -> str:
    if not isinstance(error, dict):
        return str(error)
    field = error.get("field")
    if isinstance(field, list):
        field = ".".join(str(f) for f in field)
    message = error.get("message", "")
    return f"{field}: {message}" if field else message


def describe_failure(body: Dict[str, Any]) -> str:
    """One line of text for a ``success: false`` body."""
    if body.get("errors"):
        return "; ".join(_format_user_error(e) for e in body["errors"])
    if body.get("error"):
        return str(body["error"])
    if body.get("detail"):
        return str(body["detail"])
    return "Unknown error"


class ProductsPanel:
    def __init__(self, client: ProductsClient):
        self.client = client
        self.products: List[Dict[str, Any]] = []
        self.next_cursor: Optional[str] = None
        self.has_next_page = False
        self.loading = False

        self.modal = ModalState.CLOSED
        self.target: Optional[Dict[str, Any]] = None
        self.form: Dict[str, Any] = {}

        self.notice: Optional[str] = None
        self.last_error: Optional[str] = None

    @property
    def saving(self) -> bool:
        return self.modal is ModalState.SAVING

    @property
    def deleting(self) -> bool:
        return self.modal is ModalState.DELETING

    # ---------------------------
    # Listing / pagination
    # ---------------------------
    def _fetch_page(self, after: Optional[str]) -> Optional[Dict[str, Any]]:
        self.loading = True
        try:
            body = self.client.list_products(after)
        except requests.RequestException as exc:
            logger.error("Error loading products: %s", exc)
            self.last_error = str(exc)
            return None
        finally:
            self.loading = False

        if not body.get("success"):
            self.last_error = describe_failure(body)
            logger.error("Error loading products: %s", self.last_error)
            return None

        page_info = body.get("pageInfo") or {}
        self.next_cursor = page_info.get("endCursor")
        self.has_next_page = bool(page_info.get("hasNextPage"))
        return body

    def load_first_page(self) -> bool:
        if self.loading:
            return False
        body = self._fetch_page(None)
        if body is None:
            return False
        self.products = list(body.get("products") or [])
        return True

    def load_more(self) -> bool:
        """Append the next page. No-op when nothing more is available."""
        if not self.has_next_page or self.loading:
            return False
        body = self._fetch_page(self.next_cursor)
        if body is None:
            return False
        self.products.extend(body.get("products") or [])
        return True

    # ---------------------------
    # Update modal
    # ---------------------------
    def open_editor(self, product: Dict[str, Any]) -> bool:
        if self.modal is not ModalState.CLOSED:
            return False
        self.target = product
        # tags stay None until edited so an untouched form never clears them
        self.form = {
            "id": product["id"],
            "title": product.get("title") or "",
            "status": product.get("status") or "DRAFT",
            "tags": None,
        }
        self.modal = ModalState.EDITING
        return True

    def edit(self, field: str, value: Any) -> None:
        if self.modal is not ModalState.EDITING:
            raise RuntimeError(f"cannot edit while {self.modal.value}")
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"{field!r} is not editable")
        self.form[field] = value

    def save(self) -> bool:
        if self.modal is not ModalState.EDITING:
            return False
        self.modal = ModalState.SAVING
        try:
            return self._save()
        finally:
            # never leave the editor stuck in flight
            if self.modal is ModalState.SAVING:
                self.modal = ModalState.EDITING

    def _save(self) -> bool:
        try:
            body = self.client.update_product(
                self.form["id"],
                title=self.form.get("title"),
                status=self.form.get("status"),
                tags=self.form.get("tags"),
            )
        except requests.RequestException as exc:
            body = {"success": False, "error": str(exc)}

        if not body.get("success"):
            self.last_error = describe_failure(body)
            logger.warning("Update failed for %s: %s", self.form["id"], self.last_error)
            self.modal = ModalState.EDITING
            return False

        self._patch(body.get("updatedProduct") or {})
        self.notice = UPDATE_NOTICE
        self.last_error = None
        self._close()
        return True

    def _patch(self, updated: Dict[str, Any]) -> None:
        for product in self.products:
            if product.get("id") == updated.get("id"):
                product.update({k: updated[k] for k in EDITABLE_FIELDS if k in updated})

    # ---------------------------
    # Delete modal
    # ---------------------------
    def open_delete(self, product: Dict[str, Any]) -> bool:
        if self.modal is not ModalState.CLOSED:
            return False
        self.target = product
        self.modal = ModalState.CONFIRMING
        return True

    def confirm_delete(self) -> bool:
        if self.modal is not ModalState.CONFIRMING:
            return False
        self.modal = ModalState.DELETING
        try:
            return self._delete(self.target)
        finally:
            self._close()

    def _delete(self, target: Dict[str, Any]) -> bool:
        try:
            body = self.client.delete_product(target["id"])
        except requests.RequestException as exc:
            body = {"success": False, "error": str(exc)}

        if not body.get("success"):
            self.last_error = describe_failure(body)
            logger.warning("Delete failed for %s: %s", target["id"], self.last_error)
            return False

        self.products = [p for p in self.products if p.get("id") != target["id"]]
        self.notice = f'Product "{target.get("title")}" was deleted successfully!'
        self.last_error = None
        return True

    # ---------------------------
    # Shared
    # ---------------------------
    def cancel(self) -> bool:
        """Close an open modal. Ignored while a save or delete is in flight."""
        if self.modal not in (ModalState.EDITING, ModalState.CONFIRMING):
            return False
        self._close()
        return True

    def dismiss_notice(self) -> None:
        self.notice = None

    def _close(self) -> None:
        self.modal = ModalState.CLOSED
        self.target = None
        self.form = {}

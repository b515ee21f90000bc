# tests/test_panel.py
import pytest
import requests

from sdk.panel import ModalState, ProductsPanel, UPDATE_NOTICE, describe_failure


def _product(num, title=None, status="ACTIVE"):
    return {"id": f"gid://shopify/Product/{num}", "title": title or f"Product {num}", "status": status}


class FakeProductsClient:
    """Answers like the /api/products routes and records what the panel was doing."""

    def __init__(self):
        self.pages = {
            None: {"success": True, "products": [_product(1), _product(2)],
                   "pageInfo": {"hasNextPage": True, "endCursor": "c2"}},
            "c2": {"success": True, "products": [_product(3)],
                   "pageInfo": {"hasNextPage": False, "endCursor": "c3"}},
        }
        self.update_result = None
        self.delete_result = None
        self.error = None
        self.calls = []
        self.panel = None
        self.modal_during_call = None

    def _call(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.panel is not None:
            self.modal_during_call = self.panel.modal
        if self.error is not None:
            raise self.error

    def list_products(self, after=None):
        self._call("list", after)
        return self.pages[after]

    def update_product(self, product_id, title=None, status=None, tags=None):
        self._call("update", product_id, title=title, status=status, tags=tags)
        if self.update_result is not None:
            return self.update_result
        return {"success": True, "updatedProduct": {"id": product_id, "title": title, "status": status, "tags": tags or []}}

    def delete_product(self, product_id):
        self._call("delete", product_id)
        if self.delete_result is not None:
            return self.delete_result
        return {"success": True, "deletedId": product_id}


@pytest.fixture
def api():
    return FakeProductsClient()


@pytest.fixture
def panel(api):
    p = ProductsPanel(api)
    api.panel = p
    p.load_first_page()
    api.calls.clear()
    return p


# ---------------------------
# Pagination
# ---------------------------
def test_first_page_sets_cursor(panel):
    assert [p["id"] for p in panel.products] == ["gid://shopify/Product/1", "gid://shopify/Product/2"]
    assert panel.next_cursor == "c2"
    assert panel.has_next_page is True
    assert panel.loading is False


def test_load_more_appends_and_advances(panel, api):
    assert panel.load_more() is True
    assert len(panel.products) == 3
    assert panel.has_next_page is False
    assert api.calls == [("list", ("c2",), {})]


def test_load_more_is_a_noop_without_next_page(panel, api):
    panel.load_more()
    api.calls.clear()
    assert panel.load_more() is False
    assert api.calls == []


def test_load_more_failure_keeps_products(panel, api):
    api.pages["c2"] = {"success": False, "products": [], "pageInfo": {}, "error": "Throttled"}
    assert panel.load_more() is False
    assert len(panel.products) == 2
    assert panel.last_error == "Throttled"
    assert panel.has_next_page is True


def test_transport_error_on_listing(api):
    api.error = requests.ConnectionError("refused")
    panel = ProductsPanel(api)
    assert panel.load_first_page() is False
    assert panel.loading is False
    assert panel.last_error == "refused"


# ---------------------------
# Update modal
# ---------------------------
def test_save_goes_through_saving_and_patches_product(panel, api):
    assert panel.open_editor(panel.products[0]) is True
    assert panel.modal is ModalState.EDITING
    assert panel.form["status"] == "ACTIVE"

    panel.edit("title", "Renamed")
    panel.edit("status", "DRAFT")
    assert panel.save() is True

    assert api.modal_during_call is ModalState.SAVING
    assert panel.modal is ModalState.CLOSED
    assert panel.products[0]["title"] == "Renamed"
    assert panel.products[0]["status"] == "DRAFT"
    assert panel.notice == UPDATE_NOTICE


def test_untouched_tags_are_not_sent(panel, api):
    panel.open_editor(panel.products[0])
    panel.save()
    _, _, kwargs = api.calls[0]
    assert kwargs["tags"] is None


def test_editor_defaults_status_to_draft(panel):
    panel.open_editor({"id": "gid://shopify/Product/9", "title": "No status"})
    assert panel.form["status"] == "DRAFT"


def test_failed_save_stays_open_with_error(panel, api):
    api.update_result = {"success": False, "errors": [{"field": ["title"], "message": "Title can't be blank"}]}
    panel.open_editor(panel.products[0])
    panel.edit("title", "")

    assert panel.save() is False
    assert panel.modal is ModalState.EDITING
    assert panel.last_error == "title: Title can't be blank"
    assert panel.products[0]["title"] == "Product 1"


def test_save_transport_error_is_surfaced(panel, api):
    panel.open_editor(panel.products[0])
    api.error = requests.Timeout("read timed out")
    assert panel.save() is False
    assert panel.modal is ModalState.EDITING
    assert panel.last_error == "read timed out"


def test_unexpected_save_error_reopens_editor(panel, api):
    panel.open_editor(panel.products[0])
    api.error = RuntimeError("boom")
    with pytest.raises(RuntimeError):
        panel.save()
    assert panel.modal is ModalState.EDITING
    assert panel.cancel() is True
    assert panel.modal is ModalState.CLOSED


def test_edit_rejects_unknown_fields(panel):
    panel.open_editor(panel.products[0])
    with pytest.raises(ValueError):
        panel.edit("price", "10.00")


def test_edit_requires_open_editor(panel):
    with pytest.raises(RuntimeError):
        panel.edit("title", "X")


# ---------------------------
# Delete modal
# ---------------------------
def test_delete_removes_product_and_sets_notice(panel, api):
    target = panel.products[1]
    assert panel.open_delete(target) is True
    assert panel.modal is ModalState.CONFIRMING

    assert panel.confirm_delete() is True
    assert api.modal_during_call is ModalState.DELETING
    assert panel.modal is ModalState.CLOSED
    assert target["id"] not in [p["id"] for p in panel.products]
    assert panel.notice == 'Product "Product 2" was deleted successfully!'


def test_failed_delete_closes_and_reports(panel, api):
    api.delete_result = {"success": False, "errors": [{"field": ["id"], "message": "Product does not exist"}]}
    panel.open_delete(panel.products[0])

    assert panel.confirm_delete() is False
    assert panel.modal is ModalState.CLOSED
    assert len(panel.products) == 2
    assert panel.last_error == "id: Product does not exist"


def test_unexpected_delete_error_closes_modal(panel, api):
    target = panel.products[0]
    panel.open_delete(target)
    api.error = RuntimeError("boom")
    with pytest.raises(RuntimeError):
        panel.confirm_delete()
    assert panel.modal is ModalState.CLOSED
    assert len(panel.products) == 2
    assert panel.open_delete(target) is True


def test_confirm_without_open_modal_is_ignored(panel, api):
    assert panel.confirm_delete() is False
    assert api.calls == []


# ---------------------------
# Shared
# ---------------------------
def test_cancel_closes_open_modal(panel):
    panel.open_delete(panel.products[0])
    assert panel.cancel() is True
    assert panel.modal is ModalState.CLOSED
    assert panel.target is None


def test_cancel_when_closed_does_nothing(panel):
    assert panel.cancel() is False


def test_only_one_modal_at_a_time(panel):
    panel.open_editor(panel.products[0])
    assert panel.open_delete(panel.products[1]) is False
    assert panel.modal is ModalState.EDITING


def test_describe_failure_variants():
    assert describe_failure({"success": False, "error": "boom"}) == "boom"
    assert describe_failure({"errors": [{"field": None, "message": "Nope"}]}) == "Nope"
    assert describe_failure({"detail": "Not Found"}) == "Not Found"
    assert describe_failure({}) == "Unknown error"

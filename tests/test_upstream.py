# tests/test_upstream.py
import asyncio
import json

import httpx
import pytest

from app.config import Settings
from app.database import MemoryAdminClient
from app.upstream import ShopifyAdminClient, build_admin_client


def _client(handler, **kwargs):
    return ShopifyAdminClient(
        shop_domain=kwargs.pop("shop_domain", "demo-store.myshopify.com"),
        access_token="shpat_test",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_posts_document_to_admin_endpoint():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["token"] = request.headers.get("X-Shopify-Access-Token")
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"ok": True}})

    async def run():
        c = _client(handler, shop_domain="https://demo-store.myshopify.com/", api_version="2024-10")
        try:
            return await c.graphql("query getProducts { x }", {"first": 5, "after": None})
        finally:
            await c.aclose()

    body = asyncio.run(run())
    assert body == {"data": {"ok": True}}
    assert seen["url"] == "https://demo-store.myshopify.com/admin/api/2024-10/graphql.json"
    assert seen["token"] == "shpat_test"
    assert seen["payload"] == {"query": "query getProducts { x }", "variables": {"first": 5, "after": None}}


def test_variables_are_omitted_when_not_given():
    seen = {}

    def handler(request: httpx.Request):
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {}})

    async def run():
        c = _client(handler)
        try:
            await c.graphql("query { shop { name } }")
        finally:
            await c.aclose()

    asyncio.run(run())
    assert seen["payload"] == {"query": "query { shop { name } }"}


def test_http_error_status_raises():
    def handler(request: httpx.Request):
        return httpx.Response(401, json={"errors": "[API] Invalid API key or access token"})

    async def run():
        c = _client(handler)
        try:
            await c.graphql("query { shop { name } }")
        finally:
            await c.aclose()

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(run())


def test_build_memory_backend():
    assert isinstance(build_admin_client(Settings(backend="memory")), MemoryAdminClient)


def test_build_shopify_backend_requires_credentials():
    with pytest.raises(ValueError):
        build_admin_client(Settings(backend="shopify", shop_domain=None, access_token=None))


def test_build_shopify_backend():
    c = build_admin_client(Settings(backend="shopify", shop_domain="demo-store.myshopify.com",
                                    access_token="shpat_test", api_version="2025-01"))
    try:
        assert isinstance(c, ShopifyAdminClient)
        assert c.endpoint == "https://demo-store.myshopify.com/admin/api/2025-01/graphql.json"
    finally:
        asyncio.run(c.aclose())


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("ADMIN_PANEL_BACKEND", "shopify")
    monkeypatch.setenv("ADMIN_PANEL_SHOP_DOMAIN", "env-store.myshopify.com")
    monkeypatch.setenv("ADMIN_PANEL_EXPOSE_ERROR_DETAILS", "false")
    settings = Settings()
    assert settings.backend == "shopify"
    assert settings.shop_domain == "env-store.myshopify.com"
    assert settings.expose_error_details is False


def test_memory_client_rejects_unknown_operations():
    body = asyncio.run(MemoryAdminClient([]).graphql("query somethingElse { shop { name } }"))
    assert body["errors"][0]["message"] == "Unsupported operation"

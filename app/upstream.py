"""
Upstream collaborator: the authenticated Shopify Admin GraphQL client.

Route handlers only ever see the ``AdminGraphQL`` protocol; which concrete
client sits behind it is decided once at startup by ``build_admin_client``.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from .config import Settings

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The upstream answered, but not with something we can use."""


class AdminGraphQL(Protocol):
    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        ...

    async def aclose(self) -> None:
        ...


class ShopifyAdminClient:
    """Posts GraphQL documents to a shop's Admin API endpoint."""

    DEFAULT_API_VERSION = "2024-10"

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        # Normalize shop domain: strip protocol, trailing slashes
        domain = shop_domain.strip()
        domain = domain.replace("https://", "").replace("http://", "").rstrip("/")

        self.shop_domain = domain
        self.api_version = api_version
        self.endpoint = f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={
                "X-Shopify-Access-Token": access_token,
                "Content-Type": "application/json",
            },
            transport=transport,
        )
        logger.info("Shopify admin client ready for %s (api %s)", self.shop_domain, self.api_version)

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables

        logger.debug("Executing GraphQL document, variables=%s", variables)
        response = await self._client.post(self.endpoint, json=payload)
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()


def build_admin_client(settings: Settings) -> AdminGraphQL:
    if settings.backend == "memory":
        from .database import MemoryAdminClient

        logger.info("Using in-memory product catalog")
        return MemoryAdminClient()

    if not settings.shop_domain or not settings.access_token:
        raise ValueError(
            "ADMIN_PANEL_SHOP_DOMAIN and ADMIN_PANEL_ACCESS_TOKEN are required for the shopify backend"
        )
    return ShopifyAdminClient(
        shop_domain=settings.shop_domain,
        access_token=settings.access_token,
        api_version=settings.api_version,
        timeout=settings.upstream_timeout,
    )

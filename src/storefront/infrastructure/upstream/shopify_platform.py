"""httpx-backed implementation of CommercePlatform for Shopify.

Catalog reads and checkout creation go through the Storefront GraphQL API;
customer lookup and registration through the Admin REST API. Every
transport failure, timeout, non-2xx status or GraphQL error surfaces as
UpstreamUnavailable so callers can apply their fallback policy.
"""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import urlsplit

import httpx
import structlog

from storefront.domain.exceptions import UpstreamUnavailable, ValidationError
from storefront.domain.gateway.commerce_platform import (
    CheckoutLineItem,
    CheckoutSession,
    CommercePlatform,
    PlatformCustomer,
)
from storefront.domain.model.catalog import CatalogEntry, CatalogImage, CatalogVariant
from storefront.domain.model.value_objects import Money

logger = structlog.get_logger(__name__)

PRODUCTS_QUERY = """
query getProducts($first: Int!) {
  products(first: $first) {
    edges {
      node {
        id
        title
        description
        handle
        tags
        priceRange { minVariantPrice { amount currencyCode } }
        images(first: 5) { edges { node { url altText } } }
        variants(first: 10) {
          edges {
            node {
              id
              title
              sku
              price { amount currencyCode }
              compareAtPrice { amount currencyCode }
              availableForSale
              quantityAvailable
            }
          }
        }
      }
    }
  }
}
"""

CHECKOUT_CREATE_MUTATION = """
mutation checkoutCreate($input: CheckoutCreateInput!) {
  checkoutCreate(input: $input) {
    checkout { id webUrl }
    checkoutUserErrors { code field message }
  }
}
"""

CATALOG_PAGE_SIZE = 50


class ShopifyPlatform(CommercePlatform):

    def __init__(
        self,
        shop_domain: str,
        storefront_token: str,
        admin_token: str = "",
        api_version: str = "2024-01",
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_version = api_version
        self._storefront_token = storefront_token
        self._admin_token = admin_token
        self._shop_domain = shop_domain
        self._timeout = timeout
        # Built on first use so cart-only work needs no platform settings.
        self._client = client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    # --- CommercePlatform interface ---------------------------------------------

    def fetch_catalog(self) -> list[CatalogEntry]:
        data = self._storefront_query(PRODUCTS_QUERY, {"first": CATALOG_PAGE_SIZE})
        try:
            return [_parse_product(edge["node"]) for edge in data["products"]["edges"]]
        except (KeyError, TypeError, ValueError, ArithmeticError, ValidationError) as exc:
            raise UpstreamUnavailable(f"Unexpected catalog payload: {exc!r}") from exc

    def create_checkout(
        self,
        lines: list[CheckoutLineItem],
        email: str | None = None,
    ) -> CheckoutSession:
        checkout_input: dict = {
            "lineItems": [{"variantId": li.variant_id, "quantity": li.quantity} for li in lines]
        }
        if email:
            checkout_input["email"] = email

        data = self._storefront_query(CHECKOUT_CREATE_MUTATION, {"input": checkout_input})
        try:
            payload = data["checkoutCreate"]
            errors = payload.get("checkoutUserErrors") or []
            if errors:
                raise ValidationError(errors[0]["message"])
            checkout = payload["checkout"]
            web_url = checkout["webUrl"]
            checkout_id = _checkout_token(web_url, checkout["id"])
        except (KeyError, TypeError) as exc:
            raise UpstreamUnavailable(f"Unexpected checkout payload: {exc!r}") from exc

        return CheckoutSession(checkout_id=checkout_id, web_url=web_url)

    def find_customer_by_email(self, email: str) -> PlatformCustomer | None:
        body = self._admin_request("GET", "customers/search.json", params={"query": f"email:{email}"})
        customers = body.get("customers") or []
        if not customers:
            return None
        try:
            return _parse_customer(customers[0])
        except (KeyError, TypeError) as exc:
            raise UpstreamUnavailable(f"Unexpected customer payload: {exc!r}") from exc

    def create_customer(
        self,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> PlatformCustomer:
        body = self._admin_request(
            "POST",
            "customers.json",
            json={"customer": {"email": email, "first_name": first_name, "last_name": last_name}},
        )
        try:
            return _parse_customer(body["customer"])
        except (KeyError, TypeError) as exc:
            raise UpstreamUnavailable(f"Unexpected customer payload: {exc!r}") from exc

    # --- Transport --------------------------------------------------------------

    def _storefront_query(self, query: str, variables: dict) -> dict:
        body = self._send(
            "POST",
            f"/api/{self._api_version}/graphql.json",
            headers={"X-Shopify-Storefront-Access-Token": self._storefront_token},
            json={"query": query, "variables": variables},
        )
        if body.get("errors"):
            message = body["errors"][0].get("message", "unknown error")
            raise UpstreamUnavailable(f"Storefront API error: {message}")
        if "data" not in body:
            raise UpstreamUnavailable("Storefront API returned no data")
        return body["data"]

    def _admin_request(self, method: str, path: str, **kwargs) -> dict:
        return self._send(
            method,
            f"/admin/api/{self._api_version}/{path}",
            headers={"X-Shopify-Access-Token": self._admin_token},
            **kwargs,
        )

    def _http(self) -> httpx.Client:
        if self._client is None:
            if not self._shop_domain:
                raise UpstreamUnavailable("Commerce platform shop domain is not configured")
            self._client = httpx.Client(
                base_url=f"https://{self._shop_domain}",
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client

    def _send(self, method: str, url: str, **kwargs) -> dict:
        client = self._http()
        try:
            response = client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            logger.error("Upstream request failed", method=method, url=url, error=str(exc))
            raise UpstreamUnavailable(f"Commerce platform request failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailable("Commerce platform returned invalid JSON") from exc


# --- Payload parsing ----------------------------------------------------------------


def _money(node: dict | None, currency: str) -> Money | None:
    if not node:
        return None
    return Money(Decimal(str(node["amount"])), node.get("currencyCode", currency))


def _parse_product(node: dict) -> CatalogEntry:
    price = _money(node["priceRange"]["minVariantPrice"], "USD")
    variants = tuple(
        CatalogVariant(
            variant_id=v["node"]["id"],
            title=v["node"]["title"],
            sku=v["node"].get("sku"),
            price=_money(v["node"]["price"], price.currency),
            compare_at_price=_money(v["node"].get("compareAtPrice"), price.currency),
            in_stock=bool(v["node"].get("availableForSale", True)),
            quantity_available=v["node"].get("quantityAvailable") or 0,
        )
        for v in node.get("variants", {}).get("edges", [])
    )
    images = tuple(
        CatalogImage(url=i["node"]["url"], alt=i["node"].get("altText"))
        for i in node.get("images", {}).get("edges", [])
    )
    return CatalogEntry(
        product_id=node["id"],
        title=node["title"],
        description=node.get("description") or "",
        price=price,
        images=images,
        variants=variants,
        handle=node.get("handle") or "",
        tags=tuple(node.get("tags") or ()),
    )


def _parse_customer(raw: dict) -> PlatformCustomer:
    return PlatformCustomer(
        customer_id=str(raw["id"]),
        email=raw["email"],
        first_name=raw.get("first_name"),
        last_name=raw.get("last_name"),
    )


def _checkout_token(web_url: str, fallback: str) -> str:
    """The last path segment of the checkout URL, as webhooks report it."""
    segment = urlsplit(web_url).path.rstrip("/").rsplit("/", 1)[-1]
    return segment or fallback

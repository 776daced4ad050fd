"""Inbound platform webhooks: signature check and payload parsing.

Only notifications whose HMAC matches the shared secret are turned into
domain objects. Everything downstream trusts what comes out of here.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
from decimal import Decimal, InvalidOperation

import structlog

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.notification import NotificationEvent, OrderNotification
from storefront.domain.model.order import OrderLine
from storefront.domain.model.value_objects import Money

logger = structlog.get_logger(__name__)

INVENTORY_TOPIC = "inventory_levels/update"


class WebhookVerifier:

    def __init__(self, secret: str) -> None:
        self._secret = secret.encode("utf-8")

    def sign(self, body: bytes) -> str:
        digest = hmac.new(self._secret, body, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def verify(self, body: bytes, signature: str | None) -> bool:
        if not self._secret:
            logger.error("Webhook secret is not configured")
            return False
        if not signature:
            logger.warning("Webhook received without signature")
            return False
        if not hmac.compare_digest(self.sign(body), signature):
            logger.warning("Invalid webhook signature", signature=signature[:20] + "...")
            return False
        return True


def parse_order_notification(topic: str, body: bytes) -> OrderNotification:
    """Turn a verified ``orders/*`` webhook body into an OrderNotification."""
    try:
        event = NotificationEvent(topic)
    except ValueError as exc:
        raise ValidationError(f"Unsupported webhook topic: {topic!r}") from exc

    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError("Webhook body is not valid JSON") from exc
    if not isinstance(data, dict) or data.get("id") is None:
        raise ValidationError("Webhook body has no order id")

    currency = data.get("currency") or "USD"
    customer = data.get("customer") or {}
    checkout = data.get("checkout_token") or data.get("checkout_id")

    return OrderNotification(
        event=event,
        order_id=str(data["id"]),
        checkout_id=str(checkout) if checkout else None,
        customer_id=str(customer["id"]) if customer.get("id") else None,
        financial_status=data.get("financial_status"),
        fulfillment_status=data.get("fulfillment_status"),
        total_price=_amount(data.get("total_price"), currency),
        lines=tuple(
            OrderLine(
                product_id=str(item.get("variant_id") or item.get("product_id") or ""),
                title=item.get("title", ""),
                quantity=_quantity(item.get("quantity", 0)),
                unit_price=_amount(item.get("price"), currency) or Money.zero(currency),
                sku=item.get("sku"),
            )
            for item in data.get("line_items") or []
        ),
    )


def _amount(raw, currency: str) -> Money | None:
    if raw is None or raw == "":
        return None
    try:
        return Money(Decimal(str(raw)), currency)
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid amount in webhook: {raw!r}") from exc


def _quantity(raw) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid quantity in webhook: {raw!r}") from exc

"""Tests for webhook signature checks and payload parsing."""

import json

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.notification import NotificationEvent
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.upstream.webhooks import WebhookVerifier, parse_order_notification

BODY = json.dumps(
    {
        "id": 9001,
        "checkout_token": "tok123",
        "customer": {"id": 55},
        "financial_status": "paid",
        "fulfillment_status": None,
        "total_price": "9.00",
        "currency": "USD",
        "line_items": [
            {"variant_id": 11, "title": "Mug", "quantity": 2, "price": "4.50", "sku": "MUG-1"}
        ],
    }
).encode()


class TestWebhookVerifier:

    def test_accepts_own_signature(self):
        verifier = WebhookVerifier("s3cret")
        assert verifier.verify(BODY, verifier.sign(BODY))

    def test_rejects_tampered_body(self):
        verifier = WebhookVerifier("s3cret")
        assert not verifier.verify(BODY + b" ", verifier.sign(BODY))

    def test_rejects_missing_signature(self):
        assert not WebhookVerifier("s3cret").verify(BODY, None)

    def test_rejects_everything_without_secret(self):
        verifier = WebhookVerifier("")
        assert not verifier.verify(BODY, verifier.sign(BODY))


class TestParseOrderNotification:

    def test_parses_fields(self):
        n = parse_order_notification("orders/paid", BODY)
        assert n.event is NotificationEvent.PAID
        assert n.order_id == "9001"
        assert n.checkout_id == "tok123"
        assert n.customer_id == "55"
        assert n.total_price == Money.of("9.00")
        assert n.lines[0].product_id == "11"
        assert n.lines[0].unit_price == Money.of("4.50")

    def test_checkout_id_fallback(self):
        body = json.dumps({"id": 1, "checkout_id": 77}).encode()
        n = parse_order_notification("orders/create", body)
        assert n.checkout_id == "77"
        assert n.customer_id is None
        assert n.total_price is None

    def test_unknown_topic(self):
        with pytest.raises(ValidationError, match="Unsupported webhook topic"):
            parse_order_notification("orders/fulfilled", BODY)

    def test_not_json(self):
        with pytest.raises(ValidationError, match="not valid JSON"):
            parse_order_notification("orders/paid", b"{oops")

    def test_missing_id(self):
        with pytest.raises(ValidationError, match="no order id"):
            parse_order_notification("orders/paid", b"{}")

    def test_bad_amount(self):
        body = json.dumps({"id": 1, "total_price": "lots"}).encode()
        with pytest.raises(ValidationError, match="Invalid amount"):
            parse_order_notification("orders/paid", body)

    def test_bad_quantity(self):
        body = json.dumps({"id": 1, "line_items": [{"variant_id": 11, "quantity": "two"}]}).encode()
        with pytest.raises(ValidationError, match="Invalid quantity"):
            parse_order_notification("orders/paid", body)

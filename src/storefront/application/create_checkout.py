"""Application service: Create Checkout use case (the hand-off).

Orchestrates the validator, the commerce platform and the ledger:

1. Re-validate the requested lines against the server-side cart.
2. Reject with a ConsistencyError if anything does not match; no
   upstream session is created.
3. Open the upstream checkout session.
4. Record a pending order carrying the cart-priced total.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import CheckoutDTO, CheckoutItemSpec
from storefront.application.validate_checkout import build_request
from storefront.domain.exceptions import ConsistencyError
from storefront.domain.gateway.commerce_platform import CheckoutLineItem, CommercePlatform
from storefront.domain.model.order import OrderLine
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.checkout_validator import CheckoutValidator
from storefront.domain.service.order_ledger import OrderLedger

logger = structlog.get_logger(__name__)


class CreateCheckoutHandler:

    def __init__(
        self,
        validator: CheckoutValidator,
        platform: CommercePlatform,
        ledger: OrderLedger,
    ) -> None:
        self._validator = validator
        self._platform = platform
        self._ledger = ledger

    def handle(
        self,
        actor_key: ActorKey,
        item_specs: list[CheckoutItemSpec],
        customer_email: str | None = None,
    ) -> CheckoutDTO:
        request = build_request(actor_key, item_specs, customer_email)

        verdict = self._validator.validate(request)
        if not verdict.valid:
            logger.warning(
                "Checkout rejected",
                actor=str(actor_key),
                problems=verdict.messages,
            )
            raise ConsistencyError(list(verdict.errors))

        session = self._platform.create_checkout(
            [
                CheckoutLineItem(p.variant_id or p.product_id, p.quantity)
                for p in verdict.priced_lines
            ],
            email=request.customer_email,
        )

        self._ledger.open_pending(
            actor_key=actor_key,
            checkout_id=session.checkout_id,
            total_amount=verdict.total_amount,
            lines=[
                OrderLine(
                    product_id=p.product_id,
                    title=p.name,
                    quantity=p.quantity,
                    unit_price=p.unit_price,
                )
                for p in verdict.priced_lines
            ],
        )

        logger.info(
            "Checkout created",
            checkout_id=session.checkout_id,
            items_count=len(verdict.priced_lines),
            actor=str(actor_key),
        )
        return CheckoutDTO(
            checkout_id=session.checkout_id,
            checkout_url=session.web_url,
            total_amount=str(verdict.total_amount),
        )

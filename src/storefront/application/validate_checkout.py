"""Application service: Validate Checkout use case (query).

Lets the client ask, before paying, whether its view of the cart still
matches the server's. Nothing is created or changed.
"""

from __future__ import annotations

from storefront.application.dto import CheckoutItemSpec, CheckoutVerdictDTO
from storefront.domain.model.checkout import CheckoutRequest, ProposedLine
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.checkout_validator import CheckoutValidator


def build_request(
    actor_key: ActorKey,
    item_specs: list[CheckoutItemSpec],
    customer_email: str | None = None,
) -> CheckoutRequest:
    return CheckoutRequest(
        actor_key=actor_key,
        proposed_lines=tuple(ProposedLine(s.product_id, s.quantity) for s in item_specs),
        customer_email=customer_email,
    )


class ValidateCheckoutHandler:

    def __init__(self, validator: CheckoutValidator) -> None:
        self._validator = validator

    def handle(self, actor_key: ActorKey, item_specs: list[CheckoutItemSpec]) -> CheckoutVerdictDTO:
        request = build_request(actor_key, item_specs)
        verdict = self._validator.validate(request)
        return CheckoutVerdictDTO(
            valid=verdict.valid,
            errors=verdict.messages,
            total_amount=str(verdict.total_amount),
            items_count=len(item_specs),
        )

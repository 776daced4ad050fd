"""Application service: Show Checkout Status use case (query).

An order is only shown to the actor whose cart it came from.
"""

from __future__ import annotations

from storefront.application.dto import OrderStatusDTO, to_order_status_dto
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, actor_key: ActorKey, checkout_id: str) -> OrderStatusDTO:
        if not checkout_id:
            raise ValidationError("Checkout ID is required")

        order = self._order_repo.get_by_checkout_id(checkout_id)
        if order is None or order.actor_key != actor_key:
            raise EntityNotFoundError(f"Checkout '{checkout_id}' not found")
        return to_order_status_dto(order)

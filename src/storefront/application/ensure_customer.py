"""Application service: Ensure Customer use case.

Finds the platform customer for an email, registering one if needed.
The returned customer id is the account id carts are stored under.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import ValidationError
from storefront.domain.gateway.commerce_platform import CommercePlatform, PlatformCustomer

logger = structlog.get_logger(__name__)


class EnsureCustomerHandler:

    def __init__(self, platform: CommercePlatform) -> None:
        self._platform = platform

    def handle(
        self,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> tuple[PlatformCustomer, bool]:
        """Return the customer and whether it was newly created."""
        email = (email or "").strip().lower()
        if not email or "@" not in email:
            raise ValidationError("A valid email is required")

        existing = self._platform.find_customer_by_email(email)
        if existing is not None:
            return existing, False

        customer = self._platform.create_customer(email, first_name, last_name)
        logger.info("Customer created", email=email, customer_id=customer.customer_id)
        return customer, True

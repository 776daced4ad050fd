"""Cart aggregate: the shopper's server-side record of what they intend to buy.

A Cart is owned by exactly one ActorKey. It holds an ordered list of
CartLines with at most one line per product. Quantities are always >= 1:
any update that would take a line to zero removes it instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import ActorKey, ActorKind, Money, Quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ProductSnapshot:
    """Point-in-time copy of the display fields of a product."""

    name: str
    badge: str = ""
    palette: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")


@dataclass
class CartLine:
    """One product entry in a cart.

    ``unit_price`` is captured when the product is first added and is the
    authoritative price for checkout validation. It is the price of
    ``variant_id``, the variant handed to the platform at checkout.
    """

    product_id: str
    quantity: Quantity
    unit_price: Money  # locked at add-to-cart time
    snapshot: ProductSnapshot
    variant_id: str | None = None  # what the platform is asked to sell
    added_at: datetime = field(default_factory=_now)

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Cart:
    """Aggregate root for a shopper's cart.

    Invariants:
    - at most one line per ``product_id``
    - every line has ``quantity >= 1``
    """

    actor_key: ActorKey
    lines: list[CartLine] = field(default_factory=list)
    updated_at: datetime = field(default_factory=_now)

    @property
    def kind(self) -> ActorKind:
        return self.actor_key.kind

    # --- Mutations --------------------------------------------------------------

    def add_line(
        self,
        product_id: str,
        quantity: int,
        unit_price: Money,
        snapshot: ProductSnapshot,
        variant_id: str | None = None,
    ) -> CartLine:
        """Add *quantity* units, summing into an existing line for the product."""
        _require_product_id(product_id)
        qty = Quantity(quantity)

        existing = self.find_line(product_id)
        if existing is not None:
            existing.quantity = existing.quantity + qty
            self._touch()
            return existing

        line = CartLine(
            product_id=product_id,
            quantity=qty,
            unit_price=unit_price,
            snapshot=snapshot,
            variant_id=variant_id,
        )
        self.lines.append(line)
        self._touch()
        return line

    def set_quantity(self, product_id: str, quantity: int) -> bool:
        """Replace a line's quantity; ``quantity <= 0`` removes the line.

        Returns True if the cart changed.
        """
        _require_product_id(product_id)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(quantity).__name__}"
            )

        if quantity <= 0:
            return self.remove_line(product_id)

        existing = self.find_line(product_id)
        if existing is None:
            raise ValidationError(
                f"Product '{product_id}' is not in the cart; add it first"
            )
        existing.quantity = Quantity(quantity)
        self._touch()
        return True

    def remove_line(self, product_id: str) -> bool:
        """Remove the line for *product_id*. Removing an absent line is a no-op."""
        _require_product_id(product_id)
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.product_id != product_id]
        if len(self.lines) == before:
            return False
        self._touch()
        return True

    def clear(self) -> None:
        self.lines = []
        self._touch()

    def absorb(self, other: Cart) -> int:
        """Fold every line of *other* into this cart.

        Quantities are summed for products already present; other lines are
        copied in, keeping their price snapshot and original ``added_at``.
        Returns the number of lines absorbed.
        """
        for incoming in other.lines:
            existing = self.find_line(incoming.product_id)
            if existing is not None:
                existing.quantity = existing.quantity + incoming.quantity
            else:
                self.lines.append(replace(incoming))
        if other.lines:
            self._touch()
        return len(other.lines)

    # --- Queries ----------------------------------------------------------------

    def find_line(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_items(self) -> int:
        return sum(line.quantity.value for line in self.lines)

    def total(self) -> Money:
        currency = self.lines[0].unit_price.currency if self.lines else "USD"
        result = Money.zero(currency)
        for line in self.lines:
            result = result + line.line_total
        return result

    # --- Internal helpers -------------------------------------------------------

    def _touch(self) -> None:
        self.updated_at = _now()


def _require_product_id(product_id: str) -> None:
    if not isinstance(product_id, str) or not product_id.strip():
        raise ValidationError("Product ID is required")

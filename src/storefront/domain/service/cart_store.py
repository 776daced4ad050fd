"""Domain service: CartStore.

The single authoritative home of every cart. Every mutation is a
read-modify-write against the repository's current state, performed while
holding the lock for the actor key, so two requests from the same browser
can never overwrite each other's changes.

Login reconciliation (``merge_into_account``) holds the locks of *both*
carts and commits the account update and the anonymous delete in one
repository transaction: it either fully happens or not at all.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Cart, ProductSnapshot
from storefront.domain.model.value_objects import ActorKey, ActorKind, Money
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.service.keyed_locks import KeyedLocks

logger = structlog.get_logger(__name__)


class CartStore:

    def __init__(self, cart_repo: CartRepository, locks: KeyedLocks | None = None) -> None:
        self._cart_repo = cart_repo
        self._locks = locks or KeyedLocks()

    # --- Queries ----------------------------------------------------------------

    def get(self, actor_key: ActorKey) -> Cart:
        """Return the actor's cart, or a new empty one if none is stored."""
        cart = self._cart_repo.get(actor_key)
        if cart is None:
            return Cart(actor_key=actor_key)
        return cart

    # --- Mutations --------------------------------------------------------------

    def add_line(
        self,
        actor_key: ActorKey,
        product_id: str,
        quantity: int,
        unit_price: Money,
        snapshot: ProductSnapshot,
        variant_id: str | None = None,
    ) -> Cart:
        with self._locks.hold(str(actor_key)):
            cart = self.get(actor_key)
            cart.add_line(product_id, quantity, unit_price, snapshot, variant_id)
            self._cart_repo.save(cart)

        logger.info(
            "Item added to cart",
            actor=str(actor_key),
            product_id=product_id,
            quantity=quantity,
        )
        return cart

    def set_quantity(self, actor_key: ActorKey, product_id: str, quantity: int) -> Cart:
        with self._locks.hold(str(actor_key)):
            cart = self.get(actor_key)
            if cart.set_quantity(product_id, quantity):
                self._cart_repo.save(cart)

        logger.info(
            "Cart item quantity set",
            actor=str(actor_key),
            product_id=product_id,
            quantity=quantity,
        )
        return cart

    def remove_line(self, actor_key: ActorKey, product_id: str) -> Cart:
        with self._locks.hold(str(actor_key)):
            cart = self.get(actor_key)
            if cart.remove_line(product_id):
                self._cart_repo.save(cart)
        return cart

    def clear(self, actor_key: ActorKey) -> Cart:
        with self._locks.hold(str(actor_key)):
            stored = self._cart_repo.get(actor_key)
            if stored is None:
                return Cart(actor_key=actor_key)
            stored.clear()
            self._cart_repo.save(stored)

        logger.info("Cart cleared", actor=str(actor_key))
        return stored

    def merge_into_account(self, anonymous_key: ActorKey, account_key: ActorKey) -> Cart:
        """Fold the anonymous cart into the account cart, then delete it.

        Replaying the merge after it has happened (or merging a session
        that never had a cart) leaves the account cart untouched.
        """
        if anonymous_key.kind is not ActorKind.ANONYMOUS:
            raise ValidationError(f"Merge source must be an anonymous cart, got {anonymous_key}")
        if account_key.kind is not ActorKind.ACCOUNT:
            raise ValidationError(f"Merge target must be an account cart, got {account_key}")

        with self._locks.hold(str(anonymous_key), str(account_key)):
            source = self._cart_repo.get(anonymous_key)
            if source is None:
                return self.get(account_key)

            # Read the account cart only now, under both locks.
            target = self.get(account_key)
            merged = target.absorb(source)
            if merged:
                self._cart_repo.commit([target], [anonymous_key])
            else:
                self._cart_repo.commit([], [anonymous_key])

        logger.info(
            "Anonymous cart merged into account",
            source=str(anonymous_key),
            target=str(account_key),
            lines_merged=merged,
        )
        return target

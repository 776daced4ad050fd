"""Abstract repository for the Cart aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live
elsewhere.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import ActorKey


class CartRepository(ABC):

    @abstractmethod
    def get(self, actor_key: ActorKey) -> Cart | None:
        """Return the persisted cart for *actor_key*, or None."""

    @abstractmethod
    def commit(self, saves: list[Cart], deletes: list[ActorKey]) -> None:
        """Persist every cart in *saves* and drop every key in *deletes*.

        All-or-nothing: on failure nothing is written and
        PersistenceFailure is raised.
        """

    def save(self, cart: Cart) -> None:
        self.commit([cart], [])

    def delete(self, actor_key: ActorKey) -> None:
        self.commit([], [actor_key])

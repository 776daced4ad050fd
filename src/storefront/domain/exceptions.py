"""Domain-level exceptions.

All failures the core can surface are subclasses of DomainException so the
CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed input: bad quantity, blank product id, unknown actor kind."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConsistencyError(DomainException):
    """A checkout request does not match the server-side cart.

    Carries the per-line problems so the client can resynchronise its
    local view of the cart.
    """

    def __init__(self, problems: list) -> None:
        self.problems = list(problems)
        details = "; ".join(p.message for p in self.problems)
        super().__init__(f"Checkout does not match cart: {details}")


class UpstreamUnavailable(DomainException):
    """The external commerce platform could not be reached or answered badly."""


class PersistenceFailure(DomainException):
    """A cart or order could not be read from or written to storage."""

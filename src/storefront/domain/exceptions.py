"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each subclass is a distinct failure kind the caller can react to.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(DomainException):
    """A product does not have enough stock to cover a reservation."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_name} "
            f"(need {requested}, have {available})"
        )


class InvalidTransitionError(DomainException):
    """An order cannot move from its current status to the requested one."""


class Unauthenticated(DomainException):
    """The caller did not present a usable bearer token."""


class Forbidden(DomainException):
    """The caller is authenticated but may not act on this resource."""


class ConcurrencyError(DomainException):
    """A store write lost a race with another writer."""


class OptimisticLockError(ConcurrencyError):
    """The stored aggregate changed since it was loaded."""

    def __init__(self, order_id: int, expected_version: int, actual_version: int) -> None:
        self.order_id = order_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Order #{order_id} was modified concurrently: "
            f"expected version {expected_version}, but current version is {actual_version}"
        )


class DuplicateOrderNumberError(ConcurrencyError):
    """Another order already uses the generated order number."""

    def __init__(self, order_number: str) -> None:
        self.order_number = order_number
        super().__init__(f"Order number {order_number} is already in use")

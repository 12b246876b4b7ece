"""Abstract repository for Order aggregate.

An order and its items are written together; implementations must make
``save`` atomic for the whole aggregate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, newest order date first."""

    @abstractmethod
    def list_by_user(self, user_id: int) -> list[Order]:
        """Return the orders owned by *user_id*, newest order date first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order.

        New orders (``id is None``) get an ID and item IDs assigned.
        Raises DuplicateOrderNumberError if another order holds the same
        number, and OptimisticLockError if the stored version no longer
        matches ``order.version``.  On success ``order.version`` is bumped.
        """

"""Shared write path for updates to existing orders."""

from __future__ import annotations

import logging

from storefront.domain.exceptions import ConcurrencyError, EntityNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def save_existing_order(order_repo: OrderRepository, order: Order) -> None:
    """Save *order*, turning a conflict on a vanished order into NotFound.

    A conflict on an order that still exists is re-raised unchanged.
    """
    try:
        order_repo.save(order)
    except ConcurrencyError:
        if order_repo.get_by_id(order.id) is None:  # type: ignore[arg-type]
            raise EntityNotFoundError(f"Order #{order.id} not found") from None
        logger.warning("Concurrent modification of order %s", order.order_number)
        raise

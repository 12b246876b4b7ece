"""Application service: Create Order use case.

Orchestrates the InventoryLedger (stock reservation) and the Order
aggregate.  From the caller's point of view the use case is
all-or-nothing: if any line cannot be reserved, or the order cannot be
stored, every reservation made so far is released before the error
propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.dto import (
    CreateOrderRequest,
    OrderDTO,
    resolve_user_name,
    to_order_dto,
    validate_create_order,
)
from storefront.domain.exceptions import DuplicateOrderNumberError
from storefront.domain.model.order import Order, OrderItem, generate_order_number
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.inventory_ledger import InventoryLedger, Reservation

logger = logging.getLogger(__name__)

# Attempts at finding an unused order number before giving up.
MAX_ORDER_NUMBER_ATTEMPTS = 5


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        user_repo: UserRepository | None = None,
        order_number_factory: Callable[[datetime], str] = generate_order_number,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._user_repo = user_repo
        self._order_number_factory = order_number_factory
        self._clock = clock

    def handle(self, user_id: int, request: CreateOrderRequest) -> OrderDTO:
        """Create a new pending order for *user_id*.

        Steps:
        1. Validate the request (no stock is touched on failure).
        2. Reserve each line in the order given, rolling back on failure.
        3. Build OrderItems with the reserved unit prices (snapshot).
        4. Persist the order and its items in one write.
        """
        request = validate_create_order(request)
        now = self._clock()

        reservations = self._reserve_all(request)
        try:
            items = [
                OrderItem(
                    id=None,
                    product_id=r.product_id,
                    product_name=r.product_name,
                    quantity=Quantity(r.quantity),
                    unit_price=r.unit_price,  # <-- price snapshot
                )
                for r in reservations
            ]
            order = self._save_with_unique_number(user_id, request, items, now)
        except Exception:
            logger.warning(
                "Order for user %s not stored, releasing %d reservation(s)",
                user_id,
                len(reservations),
            )
            self._ledger.release_all(reservations)
            raise

        logger.info(
            "Order %s created for user %s, total %s",
            order.order_number,
            user_id,
            order.total_amount,
        )
        return to_order_dto(order, resolve_user_name(self._user_repo, user_id))

    # --- Internal helpers -----------------------------------------------------

    def _reserve_all(self, request: CreateOrderRequest) -> list[Reservation]:
        reservations: list[Reservation] = []
        try:
            for spec in request.items:
                reservations.append(self._ledger.reserve(spec.product_id, spec.quantity))
        except Exception:
            if reservations:
                logger.warning(
                    "Reservation failed, rolling back %d earlier line(s)",
                    len(reservations),
                )
                self._ledger.release_all(reservations)
            raise
        return reservations

    def _save_with_unique_number(
        self,
        user_id: int,
        request: CreateOrderRequest,
        items: list[OrderItem],
        now: datetime,
    ) -> Order:
        attempts_left = MAX_ORDER_NUMBER_ATTEMPTS
        while True:
            order = Order.create(
                order_number=self._order_number_factory(now),
                user_id=user_id,
                shipping_address=request.shipping_address,
                items=items,
                phone=request.phone,
                notes=request.notes,
                now=now,
            )
            try:
                self._order_repo.save(order)
                return order
            except DuplicateOrderNumberError:
                attempts_left -= 1
                if not attempts_left:
                    raise
                logger.warning(
                    "Order number %s already taken, generating another",
                    order.order_number,
                )

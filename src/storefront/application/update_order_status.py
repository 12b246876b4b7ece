"""Application service: Update Order Status use case.

An administrative override: any status may be set, and the shipped or
delivered date is stamped when the order reaches that status.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.dto import UpdateOrderStatusRequest
from storefront.application.persistence import save_existing_order
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.keyed_lock import KeyedLock

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        order_locks: KeyedLock | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._order_repo = order_repo
        self._order_locks = order_locks or KeyedLock()
        self._clock = clock

    def handle(self, order_id: int, request: UpdateOrderStatusRequest) -> None:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            previous = order.status
            order.change_status(request.status, request.notes, now=self._clock())
            save_existing_order(self._order_repo, order)

        logger.info(
            "Order %s status %s -> %s",
            order.order_number,
            previous.value,
            order.status.value,
        )

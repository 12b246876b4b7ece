"""Application service: Cancel Order use case.

Only the owner may cancel, and only while the order is PENDING or
CONFIRMED.  Stock for every line is released before the status flip is
committed, using a two-phase approach:

  Phase 1: check ownership, status, and that every product still
           exists.  Fails before anything is released.
  Phase 2: release every line, flip the status, persist.

The order's products stay held from the first release until the write
lands.  If the write fails the released stock is reclaimed, and since
nobody could buy it in between the order goes back to exactly where it
was, so a retry releases it once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.auth import AuthorizationGate
from storefront.application.persistence import save_existing_order
from storefront.domain.exceptions import DomainException, EntityNotFoundError
from storefront.domain.model.order import Order, OrderItem
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.keyed_lock import KeyedLock

logger = logging.getLogger(__name__)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        order_locks: KeyedLock | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._order_repo = order_repo
        self._ledger = ledger
        self._order_locks = order_locks or KeyedLock()
        self._clock = clock

    def handle(self, caller_id: int, order_id: int) -> None:
        with self._order_locks.hold(order_id):
            order = self._order_repo.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError(f"Order #{order_id} not found")

            # Phase 1: nothing has changed yet
            AuthorizationGate.ensure_owner(caller_id, order)
            order.ensure_cancellable()

            with self._ledger.holding(item.product_id for item in order.items):
                for item in order.items:
                    self._ledger.ensure_releasable(item.product_id)

                # Phase 2: release, flip, persist
                released: list[OrderItem] = []
                try:
                    for item in order.items:
                        self._ledger.release(item.product_id, item.quantity.value)
                        released.append(item)
                    order.cancel(now=self._clock())
                    save_existing_order(self._order_repo, order)
                except Exception:
                    self._take_back(order, released)
                    raise

        logger.info(
            "Order %s cancelled by user %s, %d line(s) restocked",
            order.order_number,
            caller_id,
            len(order.items),
        )

    def _take_back(self, order: Order, released: list[OrderItem]) -> None:
        """Reclaim stock released for a cancellation that did not commit."""
        if not released:
            return
        logger.warning(
            "Cancellation of order %s not stored, reclaiming %d line(s)",
            order.order_number,
            len(released),
        )
        for item in released:
            try:
                self._ledger.reclaim(item.product_id, item.quantity.value)
            except (DomainException, OSError):
                logger.exception(
                    "Could not reclaim %d of product %s for order %s",
                    item.quantity.value,
                    item.product_id,
                    order.order_number,
                )

"""The order engine: every order use case behind the authorization gate.

Each entry point takes the raw ``Authorization`` header value, resolves
the caller through the AuthorizationGate, and only then hands over to the
use-case handler.  Handlers share one set of per-order locks so a status
update and a cancellation of the same order never interleave.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.auth import AuthorizationGate
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.dto import (
    CreateOrderRequest,
    OrderDTO,
    UpdateOrderStatusRequest,
)
from storefront.application.show_order import ListOrdersHandler, ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.domain.model.order import generate_order_number
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.user_repository import UserRepository
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.keyed_lock import KeyedLock


class OrderEngine:

    def __init__(
        self,
        gate: AuthorizationGate,
        order_repo: OrderRepository,
        ledger: InventoryLedger,
        user_repo: UserRepository | None = None,
        order_number_factory: Callable[[datetime], str] = generate_order_number,
        order_locks: KeyedLock | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._gate = gate
        order_locks = order_locks or KeyedLock()
        self._create = CreateOrderHandler(
            order_repo,
            ledger,
            user_repo,
            order_number_factory=order_number_factory,
            clock=clock,
        )
        self._update_status = UpdateOrderStatusHandler(order_repo, order_locks, clock=clock)
        self._cancel = CancelOrderHandler(order_repo, ledger, order_locks, clock=clock)
        self._show = ShowOrderHandler(order_repo, user_repo)
        self._list = ListOrdersHandler(order_repo, user_repo)

    # --- Commands -------------------------------------------------------------

    def create_order(self, authorization: str | None, request: CreateOrderRequest) -> OrderDTO:
        user_id = self._gate.authenticate(authorization)
        return self._create.handle(user_id, request)

    def update_order_status(
        self,
        authorization: str | None,
        order_id: int,
        request: UpdateOrderStatusRequest,
    ) -> None:
        self._gate.authenticate(authorization)
        self._update_status.handle(order_id, request)

    def cancel_order(self, authorization: str | None, order_id: int) -> None:
        user_id = self._gate.authenticate(authorization)
        self._cancel.handle(user_id, order_id)

    # --- Queries --------------------------------------------------------------

    def get_order(self, authorization: str | None, order_id: int) -> OrderDTO:
        self._gate.authenticate(authorization)
        return self._show.handle(order_id)

    def list_orders(self, authorization: str | None) -> list[OrderDTO]:
        self._gate.authenticate(authorization)
        return self._list.handle()

    def my_orders(self, authorization: str | None) -> list[OrderDTO]:
        user_id = self._gate.authenticate(authorization)
        return self._list.handle(user_id)

    def orders_by_user(self, authorization: str | None, user_id: int) -> list[OrderDTO]:
        self._gate.authenticate(authorization)
        return self._list.handle(user_id)

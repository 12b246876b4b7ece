"""Application service: order queries (read-only)."""

from __future__ import annotations

from storefront.application.dto import OrderDTO, resolve_user_name, to_order_dto
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.user_repository import UserRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        user_repo: UserRepository | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._user_repo = user_repo

    def handle(self, order_id: int) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return to_order_dto(order, resolve_user_name(self._user_repo, order.user_id))


class ListOrdersHandler:
    """Lists orders newest first, either all of them or one user's."""

    def __init__(
        self,
        order_repo: OrderRepository,
        user_repo: UserRepository | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._user_repo = user_repo

    def handle(self, user_id: int | None = None) -> list[OrderDTO]:
        if user_id is None:
            orders = self._order_repo.list_all()
        else:
            orders = self._order_repo.list_by_user(user_id)
        return self._to_dtos(orders)

    def _to_dtos(self, orders: list[Order]) -> list[OrderDTO]:
        names: dict[int, str] = {}
        result: list[OrderDTO] = []
        for order in orders:
            if order.user_id not in names:
                names[order.user_id] = resolve_user_name(self._user_repo, order.user_id)
            result.append(to_order_dto(order, names[order.user_id]))
        return result

"""JSON-file-backed implementation of OrderRepository.

The whole file is replaced on every save, so an order and its items
always land together.  Saves run under the file's inter-process lock, so
the version and order-number checks hold across CLI processes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import DuplicateOrderNumberError, OptimisticLockError
from storefront.domain.model.order import Order, OrderItem, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.read():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return _newest_first(self._to_domain(raw) for raw in self._file.read())

    def list_by_user(self, user_id: int) -> list[Order]:
        return _newest_first(
            self._to_domain(raw) for raw in self._file.read() if raw["user_id"] == user_id
        )

    def save(self, order: Order) -> None:
        with self._file.locked():
            orders = self._file.read()

            if order.id is None:
                if any(raw["order_number"] == order.order_number for raw in orders):
                    raise DuplicateOrderNumberError(order.order_number)
                self._assign_ids(order, orders)
                order.version = 1
                orders.append(self._to_raw(order))
            else:
                index = next(
                    (i for i, raw in enumerate(orders) if raw["id"] == order.id), None
                )
                if index is None:
                    raise OptimisticLockError(order.id, order.version, 0)
                stored_version = orders[index].get("version", 0)
                if stored_version != order.version:
                    raise OptimisticLockError(order.id, order.version, stored_version)
                order.version += 1
                orders[index] = self._to_raw(order)

            self._file.write(orders)

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the orders file; pass as ``KeyedLock(outer=...)``."""
        with self._file.locked():
            yield

    # --- Serialization --------------------------------------------------------

    def _assign_ids(self, order: Order, orders: list[dict]) -> None:
        order.id = self._next_id(orders)
        next_item_id = max(
            (item["id"] for raw in orders for item in raw["items"]), default=0
        ) + 1
        order.items = [
            replace(item, id=next_item_id + offset) for offset, item in enumerate(order.items)
        ]

    @staticmethod
    def _next_id(orders: list[dict]) -> int:
        if not orders:
            return 1
        return max(o["id"] for o in orders) + 1

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "shipping_address": order.shipping_address,
            "phone": order.phone,
            "notes": order.notes,
            "status": order.status.value,
            "total_amount": str(order.total_amount.amount),
            "order_date": order.order_date.isoformat(),
            "shipped_date": _iso_or_none(order.shipped_date),
            "delivered_date": _iso_or_none(order.delivered_date),
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "version": order.version,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderItem(
                id=i["id"],
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"])),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            user_id=raw["user_id"],
            shipping_address=raw["shipping_address"],
            items=items,
            total_amount=Money(Decimal(raw["total_amount"])),
            phone=raw.get("phone", ""),
            notes=raw.get("notes", ""),
            status=OrderStatus(raw["status"]),
            order_date=datetime.fromisoformat(raw["order_date"]),
            shipped_date=_datetime_or_none(raw.get("shipped_date")),
            delivered_date=_datetime_or_none(raw.get("delivered_date")),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            version=raw.get("version", 0),
        )


def _newest_first(orders) -> list[Order]:
    return sorted(orders, key=lambda o: o.order_date, reverse=True)


def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _datetime_or_none(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None

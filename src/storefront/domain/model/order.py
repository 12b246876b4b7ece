"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.
All business invariants are enforced here.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import InvalidTransitionError, ValidationError
from storefront.domain.model.value_objects import Money, Quantity


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, raw: str) -> OrderStatus:
        """Look a status up by value or name, ignoring case."""
        for status in cls:
            if raw.strip().lower() in (status.value.lower(), status.name.lower()):
                return status
        allowed = ", ".join(s.value for s in cls)
        raise ValidationError(f"Unknown order status {raw!r} (expected one of: {allowed})")


CANCELLABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


@dataclass(frozen=True)
class OrderItem:
    """Captures the price snapshot of a product at order-creation time.

    Immutable once created; the repository assigns ``id`` on first save.
    """

    id: int | None
    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at reservation time

    @property
    def total_price(self) -> Money:
        return self.unit_price * self.quantity.value


def generate_order_number(now: datetime | None = None) -> str:
    """Return ``ORD-YYYYMMDD-XXXXXXXX``; unique only with high probability."""
    stamp = (now or _utcnow()).strftime("%Y%m%d")
    return f"ORD-{stamp}-{uuid.uuid4().hex[:8].upper()}"


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    user_id: int
    shipping_address: str
    items: list[OrderItem]
    total_amount: Money
    phone: str = ""
    notes: str = ""
    status: OrderStatus = OrderStatus.PENDING
    order_date: datetime = field(default_factory=_utcnow)
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        user_id: int,
        shipping_address: str,
        items: list[OrderItem],
        phone: str = "",
        notes: str = "",
        now: datetime | None = None,
    ) -> Order:
        """Create a new pending order; the total is fixed here for good."""
        if not items:
            raise ValidationError("Order must contain at least one item")
        if not shipping_address or not shipping_address.strip():
            raise ValidationError("Shipping address is required")

        total = Money.zero()
        for item in items:
            total = total + item.total_price

        now = now or _utcnow()
        return Order(
            id=None,
            order_number=order_number,
            user_id=user_id,
            shipping_address=shipping_address.strip(),
            items=list(items),
            total_amount=total,
            phone=phone,
            notes=notes,
            order_date=now,
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(
        self,
        new_status: OrderStatus,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> None:
        """Set the status unconditionally and stamp the matching date.

        The transition graph is not enforced here; this is the
        administrative override.
        """
        now = now or _utcnow()
        self.status = new_status
        if notes:
            self.notes = notes
        if new_status is OrderStatus.SHIPPED:
            self.shipped_date = now
        elif new_status is OrderStatus.DELIVERED:
            self.delivered_date = now
        self.updated_at = now

    def ensure_cancellable(self) -> None:
        if self.status is OrderStatus.CANCELLED:
            raise InvalidTransitionError(f"Order {self.order_number} is already cancelled")
        if self.status not in CANCELLABLE_STATUSES:
            raise InvalidTransitionError(
                f"Cannot cancel order that is already being processed "
                f"(status {self.status.value})"
            )

    def cancel(self, now: datetime | None = None) -> None:
        """Transition PENDING|CONFIRMED -> CANCELLED.

        Stock release must happen *before* calling this (coordinated by
        the application handler via the InventoryLedger).
        """
        self.ensure_cancellable()
        self.status = OrderStatus.CANCELLED
        self.updated_at = now or _utcnow()

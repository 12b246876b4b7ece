"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Request DTOs are
checked by the ``validate_*`` functions before any handler mutates state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.repository.user_repository import UserRepository

MAX_SHIPPING_ADDRESS_LENGTH = 500
MAX_PHONE_LENGTH = 20
MAX_NOTES_LENGTH = 1000


# --- Requests -----------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product ID + quantity)."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class CreateOrderRequest:
    shipping_address: str
    items: list[OrderItemSpec]
    phone: str = ""
    notes: str = ""


@dataclass(frozen=True)
class UpdateOrderStatusRequest:
    status: OrderStatus
    notes: str | None = None


def validate_create_order(request: CreateOrderRequest) -> CreateOrderRequest:
    """Check a create request and return a normalized copy."""
    address = (request.shipping_address or "").strip()
    if not address:
        raise ValidationError("Shipping address is required")
    _check_length("Shipping address", address, MAX_SHIPPING_ADDRESS_LENGTH)
    phone = (request.phone or "").strip()
    _check_length("Phone", phone, MAX_PHONE_LENGTH)
    notes = request.notes or ""
    _check_length("Notes", notes, MAX_NOTES_LENGTH)

    if not request.items:
        raise ValidationError("Order must contain at least one item")
    for spec in request.items:
        if not _is_int(spec.product_id) or spec.product_id <= 0:
            raise ValidationError(f"Invalid product ID {spec.product_id!r}")
        if not _is_int(spec.quantity) or spec.quantity < 1:
            raise ValidationError(
                f"Quantity for product {spec.product_id} must be positive"
            )

    return CreateOrderRequest(
        shipping_address=address,
        items=list(request.items),
        phone=phone,
        notes=notes,
    )


def validate_status_update(status: str | OrderStatus, notes: str | None = None) -> UpdateOrderStatusRequest:
    if not isinstance(status, OrderStatus):
        status = OrderStatus.parse(status)
    if notes is not None:
        _check_length("Notes", notes, MAX_NOTES_LENGTH)
    return UpdateOrderStatusRequest(status=status, notes=notes)


def _check_length(label: str, value: str, limit: int) -> None:
    if len(value) > limit:
        raise ValidationError(f"{label} must be at most {limit} characters")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# --- Responses ----------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: a single line item as displayed to the user."""

    id: int
    product_id: int
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "15.00"
    total_price: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    user_id: int
    user_name: str
    shipping_address: str
    phone: str
    notes: str
    status: str
    total_amount: str
    order_date: datetime
    created_at: datetime
    updated_at: datetime
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None
    items: list[OrderItemDTO] = field(default_factory=list)


def to_order_dto(order: Order, user_name: str = "") -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        user_id=order.user_id,
        user_name=user_name,
        shipping_address=order.shipping_address,
        phone=order.phone,
        notes=order.notes,
        status=order.status.value,
        total_amount=str(order.total_amount),
        order_date=order.order_date,
        created_at=order.created_at,
        updated_at=order.updated_at,
        shipped_date=order.shipped_date,
        delivered_date=order.delivered_date,
        items=[
            OrderItemDTO(
                id=item.id,  # type: ignore[arg-type]
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                total_price=str(item.total_price),
            )
            for item in order.items
        ],
    )


def resolve_user_name(user_repo: UserRepository | None, user_id: int) -> str:
    """Display name for an order's owner; blank when the user is unknown."""
    if user_repo is None:
        return ""
    user = user_repo.get_by_id(user_id)
    return user.name if user is not None else ""

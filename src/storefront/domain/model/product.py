"""Product aggregate.

Products live independently of orders. Catalog fields (name, price) are
maintained by the catalog; ``stock`` is only ever changed through the
InventoryLedger so that reservations stay atomic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A product in the catalog.

    Invariant: ``stock`` is never negative.
    """

    id: int | None
    name: str
    price: Money
    stock: int = 0
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError(f"Stock cannot be negative, got {self.stock}")

    def take_stock(self, quantity: int) -> None:
        """Decrement stock by *quantity*; caller holds the product lock."""
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.stock:
            raise ValidationError(
                f"Cannot take {quantity} of {self.name}, only {self.stock} in stock"
            )
        self.stock -= quantity
        self.updated_at = _utcnow()

    def return_stock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        self.stock += quantity
        self.updated_at = _utcnow()

    def deactivate(self) -> None:
        """Soft-delete: existing orders keep referencing the product."""
        self.is_active = False
        self.updated_at = _utcnow()

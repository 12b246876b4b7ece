"""Domain service: Inventory Ledger.

The ledger is the only writer of ``Product.stock``.  Each reservation is a
read-check-decrement on one product, performed while holding that product's
lock so concurrent orders for the last unit cannot both succeed.

The ledger keeps no record of what it reserved; undoing a reservation
exactly once is the caller's job.  Callers that must undo a release can
hold the affected products with ``holding()`` so nobody else takes the
units in between.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.keyed_lock import KeyedLock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reservation:
    """Stock taken for one order line, with the price seen at that instant."""

    product_id: int
    product_name: str
    quantity: int
    unit_price: Money


class InventoryLedger:

    def __init__(
        self,
        product_repo: ProductRepository,
        locks: KeyedLock | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._locks = locks or KeyedLock()

    def reserve(self, product_id: int, quantity: int) -> Reservation:
        """Take *quantity* units of a product out of stock.

        Raises EntityNotFoundError for unknown or inactive products and
        InsufficientStockError when stock is short.  Nothing is written
        on failure.
        """
        _check_quantity(quantity)
        with self._locks.hold(product_id):
            product = self._product_repo.get_by_id(product_id)
            if product is None or not product.is_active:
                raise EntityNotFoundError(f"Product with ID {product_id} not found")
            if product.stock < quantity:
                raise InsufficientStockError(product.name, quantity, product.stock)

            product.take_stock(quantity)
            self._product_repo.save(product)
            logger.debug(
                "Reserved %d of product %s, %d left", quantity, product_id, product.stock
            )
            return Reservation(
                product_id=product_id,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.price,
            )

    def release(self, product_id: int, quantity: int) -> None:
        """Put *quantity* units back into stock.

        Inactive products still accept released stock; a product that no
        longer exists is an error.
        """
        _check_quantity(quantity)
        with self._locks.hold(product_id):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID {product_id} not found")
            product.return_stock(quantity)
            self._product_repo.save(product)
            logger.debug(
                "Released %d of product %s, %d now in stock",
                quantity,
                product_id,
                product.stock,
            )

    def reclaim(self, product_id: int, quantity: int) -> None:
        """Take back units released for a change that was never stored.

        Unlike reserve, inactive products are accepted.  The caller should
        hold the product since the release; short stock then means
        someone bypassed the ledger and raises ValidationError.
        """
        _check_quantity(quantity)
        with self._locks.hold(product_id):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID {product_id} not found")
            product.take_stock(quantity)
            self._product_repo.save(product)
            logger.debug(
                "Reclaimed %d of product %s, %d left", quantity, product_id, product.stock
            )

    @contextmanager
    def holding(self, product_ids: Iterable[int]) -> Iterator[None]:
        """Keep other reservations and releases of these products out."""
        with self._locks.hold_all(product_ids):
            yield

    def ensure_releasable(self, product_id: int) -> None:
        """Fail now, before anything is released, if a product is gone."""
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product with ID {product_id} not found")

    def release_all(self, reservations: list[Reservation]) -> None:
        """Undo reservations in reverse order."""
        for reservation in reversed(reservations):
            self.release(reservation.product_id, reservation.quantity)


def _check_quantity(quantity: int) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity <= 0:
        raise ValidationError(f"Quantity must be a positive integer, got {quantity!r}")

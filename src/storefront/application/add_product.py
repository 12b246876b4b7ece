"""Application service: Add Product use case.

The catalog proper lives elsewhere; this is enough to stock a storefront
from the command line.
"""

from __future__ import annotations

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.keyed_lock import KeyedLock


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, name: str, price: str, stock: int = 0) -> Product:
        """Add a new product to the catalog."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        product = Product(id=None, name=name.strip(), price=Money.of(price), stock=stock)
        self._product_repo.save(product)
        return product


class DeactivateProductHandler:
    """Soft-delete: the product stays on record for existing orders.

    Runs under the same product locks as the InventoryLedger so the row
    written back cannot carry a stale stock figure.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        locks: KeyedLock | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._locks = locks or KeyedLock()

    def handle(self, product_id: int) -> None:
        with self._locks.hold(product_id):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID {product_id} not found")
            product.deactivate()
            self._product_repo.save(product)

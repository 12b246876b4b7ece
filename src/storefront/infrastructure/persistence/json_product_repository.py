"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        for raw in self._file.read():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._file.read()]

    def save(self, product: Product) -> None:
        with self._file.locked():
            products = self._file.read()

            if product.id is None:
                product.id = max((p["id"] for p in products), default=0) + 1

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(products):
                if raw["id"] == product.id:
                    products[i] = self._to_raw(product)
                    break
            else:
                products.append(self._to_raw(product))

            self._file.write(products)

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the products file; pass as ``KeyedLock(outer=...)``."""
        with self._file.locked():
            yield

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "stock": product.stock,
            "is_active": product.is_active,
            "created_at": product.created_at.isoformat(),
            "updated_at": product.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            price=Money(Decimal(raw["price"])),
            stock=raw.get("stock", 0),
            is_active=raw.get("is_active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class ProductLineDTO:
    id: int
    name: str
    price: str
    stock: int
    is_active: bool


class ShowInventoryHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, include_inactive: bool = False) -> list[ProductLineDTO]:
        return [
            ProductLineDTO(
                id=product.id,  # type: ignore[arg-type]
                name=product.name,
                price=str(product.price),
                stock=product.stock,
                is_active=product.is_active,
            )
            for product in self._product_repo.list_all()
            if product.is_active or include_inactive
        ]

"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from storefront.application.auth import AuthorizationGate
from storefront.application.order_engine import OrderEngine
from storefront.domain.service.inventory_ledger import InventoryLedger
from storefront.domain.service.keyed_lock import KeyedLock
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.persistence.json_token_service import JsonTokenService
from storefront.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)


def product_repository(settings: Settings) -> JsonProductRepository:
    return JsonProductRepository(settings.data_dir / "products.json")


def order_repository(settings: Settings) -> JsonOrderRepository:
    return JsonOrderRepository(settings.data_dir / "orders.json")


def user_repository(settings: Settings) -> JsonUserRepository:
    return JsonUserRepository(settings.data_dir / "users.json")


def token_service(settings: Settings) -> JsonTokenService:
    return JsonTokenService(
        settings.data_dir / "tokens.json",
        ttl=timedelta(minutes=settings.token_ttl_minutes),
    )


@dataclass
class Container:
    """Everything one CLI invocation needs, built from one Settings."""

    settings: Settings
    products: JsonProductRepository
    orders: JsonOrderRepository
    users: JsonUserRepository
    tokens: JsonTokenService
    product_locks: KeyedLock
    engine: OrderEngine


def build_container(settings: Settings) -> Container:
    products = product_repository(settings)
    orders = order_repository(settings)
    users = user_repository(settings)
    tokens = token_service(settings)
    # Each CLI call is its own process; the key locks also take the file locks
    product_locks = KeyedLock(outer=products.locked)
    engine = OrderEngine(
        gate=AuthorizationGate(tokens),
        order_repo=orders,
        ledger=InventoryLedger(products, product_locks),
        user_repo=users,
        order_locks=KeyedLock(outer=orders.locked),
    )
    return Container(settings, products, orders, users, tokens, product_locks, engine)

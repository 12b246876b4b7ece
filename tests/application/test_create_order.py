"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories, no file I/O.
"""

from datetime import datetime, timezone

import pytest

from storefront.application.create_order import (
    MAX_ORDER_NUMBER_ATTEMPTS,
    CreateOrderHandler,
)
from storefront.domain.exceptions import (
    DuplicateOrderNumberError,
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.user import User
from storefront.domain.model.value_objects import Money
from storefront.domain.service.inventory_ledger import InventoryLedger
from tests.factories import ALICE, make_products, make_request
from tests.fakes import FakeOrderRepository, FakeProductRepository, FakeUserRepository

NOW = datetime(2026, 5, 2, 8, 0, tzinfo=timezone.utc)


def _setup(order_repo=None, **kwargs):
    """Build handler with fake repos pre-loaded with the standard catalog."""
    order_repo = order_repo or FakeOrderRepository()
    product_repo = FakeProductRepository(make_products(**kwargs.pop("stock", {})))
    user_repo = FakeUserRepository([User(id=ALICE, name="Alice", email="a@example.com")])
    handler = CreateOrderHandler(
        order_repo,
        InventoryLedger(product_repo),
        user_repo,
        clock=lambda: NOW,
        **kwargs,
    )
    return handler, order_repo, product_repo


class TestCreateOrderHappyPath:

    def test_reserves_stock_and_totals_order(self):
        handler, _, products = _setup(stock={"widget": 5})

        dto = handler.handle(ALICE, make_request((1, 3)))

        assert products.get_by_id(1).stock == 2
        assert dto.total_amount == "45.00"
        assert dto.status == OrderStatus.PENDING.value
        assert dto.items[0].unit_price == "15.00"
        assert dto.items[0].total_price == "45.00"

    def test_multiple_lines(self):
        handler, _, products = _setup()

        dto = handler.handle(ALICE, make_request((1, 3), (2, 5)))

        assert dto.total_amount == "170.00"
        assert [i.product_name for i in dto.items] == ["Widget", "Gadget"]
        assert products.get_by_id(2).stock == 5

    def test_persists_order_with_ids(self):
        handler, order_repo, _ = _setup()
        dto = handler.handle(ALICE, make_request((1, 1)))

        saved = order_repo.get_by_id(dto.id)
        assert saved is not None
        assert saved.user_id == ALICE
        assert saved.items[0].id is not None
        assert saved.total_amount == Money.of("15.00")

    def test_resolves_user_name_and_dates(self):
        handler, _, _ = _setup()
        dto = handler.handle(ALICE, make_request((1, 1)))
        assert dto.user_name == "Alice"
        assert dto.order_date == NOW
        assert dto.order_number.startswith("ORD-20260502-")

    def test_unknown_user_gets_blank_name(self):
        handler, _, _ = _setup()
        dto = handler.handle(42, make_request((1, 1)))
        assert dto.user_name == ""


class TestCreateOrderPriceLock:

    def test_price_snapshot_at_creation(self):
        handler, order_repo, products = _setup()
        dto = handler.handle(ALICE, make_request((1, 1)))

        products.get_by_id(1).price = Money.of("99.99")

        saved = order_repo.get_by_id(dto.id)
        assert saved.total_amount == Money.of("15.00")
        assert saved.items[0].unit_price == Money.of("15.00")


class TestCreateOrderAllOrNothing:

    def test_insufficient_stock_leaves_stock_unchanged(self):
        handler, order_repo, products = _setup(stock={"widget": 5})

        with pytest.raises(InsufficientStockError):
            handler.handle(ALICE, make_request((1, 10)))

        assert products.get_by_id(1).stock == 5
        assert order_repo.list_all() == []

    def test_second_line_failure_rolls_back_first(self):
        handler, order_repo, products = _setup(stock={"widget": 5, "gadget": 2})

        with pytest.raises(InsufficientStockError, match="Gadget"):
            handler.handle(ALICE, make_request((1, 3), (2, 3)))

        assert products.get_by_id(1).stock == 5
        assert products.get_by_id(2).stock == 2
        assert order_repo.list_all() == []

    def test_unknown_product_rolls_back(self):
        handler, _, products = _setup(stock={"widget": 5})

        with pytest.raises(EntityNotFoundError, match="Product with ID 99"):
            handler.handle(ALICE, make_request((1, 2), (99, 1)))

        assert products.get_by_id(1).stock == 5

    def test_store_failure_releases_reservations(self):
        class BrokenOrderRepository(FakeOrderRepository):
            def save(self, order):
                raise OSError("disk full")

        handler, _, products = _setup(order_repo=BrokenOrderRepository(), stock={"widget": 5})

        with pytest.raises(OSError):
            handler.handle(ALICE, make_request((1, 3)))

        assert products.get_by_id(1).stock == 5


class TestCreateOrderValidation:

    def test_empty_items_rejected_before_reserving(self):
        handler, _, products = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            handler.handle(ALICE, make_request())
        assert products.get_by_id(1).stock == 5

    def test_zero_quantity_rejected_before_reserving(self):
        handler, _, products = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle(ALICE, make_request((1, 2), (2, 0)))
        assert products.get_by_id(1).stock == 5

    def test_missing_address_rejected(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Shipping address is required"):
            handler.handle(ALICE, make_request((1, 1), address=" "))


class TestOrderNumberCollision:

    def test_regenerates_on_collision(self):
        numbers = iter(["ORD-X", "ORD-X", "ORD-Y"])
        handler, _, _ = _setup(order_number_factory=lambda now: next(numbers))

        first = handler.handle(ALICE, make_request((2, 1)))
        second = handler.handle(ALICE, make_request((2, 1)))

        assert first.order_number == "ORD-X"
        assert second.order_number == "ORD-Y"

    def test_gives_up_and_releases_stock(self):
        handler, _, products = _setup(order_number_factory=lambda now: "ORD-SAME")
        handler.handle(ALICE, make_request((2, 1)))
        assert products.get_by_id(2).stock == 9

        with pytest.raises(DuplicateOrderNumberError):
            handler.handle(ALICE, make_request((2, 1)))

        assert products.get_by_id(2).stock == 9
        assert MAX_ORDER_NUMBER_ATTEMPTS > 1

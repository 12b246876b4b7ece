"""Unit tests for the InventoryLedger domain service."""

import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from storefront.domain.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    ValidationError,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.service.inventory_ledger import InventoryLedger, Reservation
from tests.factories import make_products
from tests.fakes import FakeProductRepository


def _setup(**stock: int) -> tuple[InventoryLedger, FakeProductRepository]:
    repo = FakeProductRepository(make_products(**stock))
    return InventoryLedger(repo), repo


class TestReserve:

    def test_decrements_stock_and_returns_price_snapshot(self):
        ledger, repo = _setup(widget=5)

        reservation = ledger.reserve(1, 3)

        assert reservation == Reservation(1, "Widget", 3, Money.of("15.00"))
        assert repo.get_by_id(1).stock == 2

    def test_exact_stock_allowed(self):
        ledger, repo = _setup(widget=5)
        ledger.reserve(1, 5)
        assert repo.get_by_id(1).stock == 0

    def test_insufficient_stock_rejected(self):
        ledger, repo = _setup(widget=5)

        with pytest.raises(InsufficientStockError, match="Insufficient stock for product Widget") as info:
            ledger.reserve(1, 10)

        assert info.value.requested == 10
        assert info.value.available == 5
        assert repo.get_by_id(1).stock == 5

    def test_unknown_product_rejected(self):
        ledger, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product with ID 99 not found"):
            ledger.reserve(99, 1)

    def test_inactive_product_rejected(self):
        ledger, repo = _setup(widget=5)
        repo.get_by_id(1).deactivate()

        with pytest.raises(EntityNotFoundError):
            ledger.reserve(1, 1)
        assert repo.get_by_id(1).stock == 5

    @pytest.mark.parametrize("qty", [0, -2, True])
    def test_non_positive_quantity_rejected(self, qty):
        ledger, _ = _setup()
        with pytest.raises(ValidationError, match="positive integer"):
            ledger.reserve(1, qty)

    def test_price_snapshot_not_affected_by_later_change(self):
        ledger, repo = _setup()
        reservation = ledger.reserve(1, 1)
        repo.get_by_id(1).price = Money.of("99.99")
        assert reservation.unit_price == Money.of("15.00")


class TestRelease:

    def test_increments_stock(self):
        ledger, repo = _setup(widget=2)
        ledger.release(1, 3)
        assert repo.get_by_id(1).stock == 5

    def test_inactive_product_still_restocked(self):
        ledger, repo = _setup(widget=2)
        repo.get_by_id(1).deactivate()
        ledger.release(1, 3)
        assert repo.get_by_id(1).stock == 5

    def test_missing_product_rejected(self):
        ledger, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ledger.release(99, 1)

    def test_release_all_undoes_reservations(self):
        ledger, repo = _setup(widget=5, gadget=10)
        reservations = [ledger.reserve(1, 2), ledger.reserve(2, 7)]

        ledger.release_all(reservations)

        assert repo.get_by_id(1).stock == 5
        assert repo.get_by_id(2).stock == 10


class TestReclaim:

    def test_takes_released_units_back(self):
        ledger, repo = _setup(widget=2)
        ledger.release(1, 3)
        ledger.reclaim(1, 3)
        assert repo.get_by_id(1).stock == 2

    def test_inactive_product_accepted(self):
        ledger, repo = _setup(widget=2)
        ledger.release(1, 3)
        repo.get_by_id(1).deactivate()

        ledger.reclaim(1, 3)

        assert repo.get_by_id(1).stock == 2

    def test_short_stock_rejected(self):
        ledger, repo = _setup(widget=2)
        with pytest.raises(ValidationError, match="only 2 in stock"):
            ledger.reclaim(1, 3)
        assert repo.get_by_id(1).stock == 2

    def test_missing_product_rejected(self):
        ledger, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ledger.reclaim(99, 1)


class TestHolding:

    def test_other_reservations_wait_until_released(self):
        ledger, repo = _setup(widget=3)
        done = threading.Event()

        def buy():
            ledger.reserve(1, 3)
            done.set()

        with ledger.holding([1]):
            ledger.release(1, 2)
            buyer = threading.Thread(target=buy)
            buyer.start()
            assert not done.wait(timeout=0.1)
            ledger.reclaim(1, 2)

        buyer.join(timeout=1)
        assert done.is_set()
        assert repo.get_by_id(1).stock == 0

    def test_holder_can_reserve_and_release(self):
        ledger, repo = _setup(widget=5, gadget=10)
        with ledger.holding([2, 1]):
            ledger.reserve(1, 1)
            ledger.release(2, 1)
        assert repo.get_by_id(1).stock == 4
        assert repo.get_by_id(2).stock == 11


class TestStockNeverNegative:

    def test_random_sequence_of_valid_calls(self):
        ledger, repo = _setup(widget=20)
        rng = random.Random(1234)
        held: list[int] = []

        for _ in range(500):
            if held and rng.random() < 0.4:
                ledger.release(1, held.pop(rng.randrange(len(held))))
            else:
                qty = rng.randint(1, 6)
                try:
                    ledger.reserve(1, qty)
                    held.append(qty)
                except InsufficientStockError:
                    pass
            assert repo.get_by_id(1).stock >= 0
            assert repo.get_by_id(1).stock + sum(held) == 20

    def test_concurrent_reservations_never_oversell(self):
        ledger, repo = _setup(gadget=10)

        def attempt(_):
            try:
                ledger.reserve(2, 1)
                return True
            except InsufficientStockError:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(attempt, range(50)))

        assert results.count(True) == 10
        assert repo.get_by_id(2).stock == 0

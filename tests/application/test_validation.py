"""Tests for request validation."""

import pytest

from storefront.application.dto import (
    MAX_NOTES_LENGTH,
    CreateOrderRequest,
    OrderItemSpec,
    validate_create_order,
    validate_status_update,
)
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus


def _request(**overrides) -> CreateOrderRequest:
    fields = dict(
        shipping_address="Jl. Thamrin 10",
        items=[OrderItemSpec(1, 2)],
        phone="0812",
        notes="",
    )
    fields.update(overrides)
    return CreateOrderRequest(**fields)


def test_valid_request_is_normalized():
    result = validate_create_order(_request(shipping_address="  Jl. Thamrin 10 ", phone=" 0812 "))
    assert result.shipping_address == "Jl. Thamrin 10"
    assert result.phone == "0812"


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"items": []}, "at least one item"),
        ({"shipping_address": ""}, "Shipping address is required"),
        ({"shipping_address": "x" * 501}, "Shipping address must be at most 500"),
        ({"phone": "1" * 21}, "Phone must be at most 20"),
        ({"notes": "n" * (MAX_NOTES_LENGTH + 1)}, "Notes must be at most 1000"),
        ({"items": [OrderItemSpec(0, 1)]}, "Invalid product ID"),
        ({"items": [OrderItemSpec(1, 0)]}, "must be positive"),
        ({"items": [OrderItemSpec(1, -3)]}, "must be positive"),
    ],
)
def test_invalid_requests(overrides, message):
    with pytest.raises(ValidationError, match=message):
        validate_create_order(_request(**overrides))


def test_status_update_parses_status():
    request = validate_status_update("confirmed", "ok")
    assert request.status is OrderStatus.CONFIRMED
    assert request.notes == "ok"


def test_status_update_accepts_enum():
    assert validate_status_update(OrderStatus.SHIPPED).status is OrderStatus.SHIPPED


def test_status_update_rejects_unknown_status():
    with pytest.raises(ValidationError, match="Unknown order status"):
        validate_status_update("Teleported")


def test_status_update_rejects_long_notes():
    with pytest.raises(ValidationError, match="Notes must be at most"):
        validate_status_update("Shipped", "n" * (MAX_NOTES_LENGTH + 1))

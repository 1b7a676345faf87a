from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from app.schemas.cart import CartItem, normalize_currency


def _payload(**overrides):
    data = {
        "product": str(uuid.uuid4()),
        "name": "Polo Shirt",
        "slug": "polo-shirt",
        "qty": 1,
        "image": "/images/polo.jpg",
        "price": "59.99",
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("10", "10.00"), ("4.5", "4.50"), ("59.99", "59.99"), (12, "12.00"), (4.5, "4.50")],
)
def test_price_is_normalized_to_two_decimals(raw, expected) -> None:
    assert normalize_currency(raw) == expected
    assert CartItem.model_validate(_payload(price=raw)).price == expected


@pytest.mark.parametrize("raw", ["10.999", "-1.00", "abc", "", "1e3", True, None])
def test_bad_prices_are_rejected(raw) -> None:
    with pytest.raises(ValidationError):
        CartItem.model_validate(_payload(price=raw))


def test_qty_must_be_non_negative_integer() -> None:
    assert CartItem.model_validate(_payload(qty=0)).qty == 0
    with pytest.raises(ValidationError):
        CartItem.model_validate(_payload(qty=-1))
    with pytest.raises(ValidationError):
        CartItem.model_validate(_payload(qty=1.5))


@pytest.mark.parametrize("field", ["name", "slug", "image"])
def test_blank_text_fields_are_rejected(field: str) -> None:
    with pytest.raises(ValidationError):
        CartItem.model_validate(_payload(**{field: "   "}))


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(ValidationError):
        CartItem.model_validate(_payload(discount="5.00"))


def test_product_must_be_an_id() -> None:
    with pytest.raises(ValidationError):
        CartItem.model_validate(_payload(product=""))

# app/services/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from app.schemas.cart import CartItem, CartTotals

CENT = Decimal("0.01")

# Orders strictly above this subtotal ship for free
FREE_SHIPPING_THRESHOLD = Decimal("100")
SHIPPING_FEE = Decimal("10")

# Fixed tax rate (15%)
TAX_RATE = Decimal("0.15")


def round2(value: Decimal | int | float | str) -> Decimal:
    """
    Round to the nearest cent, ties away from zero.

    Floats go through their repr so 1.005 rounds as written (1.01),
    not as its binary approximation (1.00499...).
    """
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _fmt(value: Decimal) -> str:
    return f"{value:.2f}"


def calc_price(items: Iterable[CartItem]) -> CartTotals:
    """
    Compute cart totals from its lines.

      items_price    = round2(sum(price * qty))
      shipping_price = 0 if items_price > 100 else 10
      tax_price      = round2(0.15 * items_price)
      total_price    = round2(items_price + tax_price + shipping_price)

    Pure: no I/O, same input => same output.
    """
    items_price = round2(
        sum((Decimal(item.price) * item.qty for item in items), Decimal("0"))
    )
    shipping_price = (
        Decimal("0") if items_price > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    )
    tax_price = round2(TAX_RATE * items_price)
    total_price = round2(items_price + tax_price + shipping_price)

    return CartTotals(
        items_price=_fmt(items_price),
        shipping_price=_fmt(round2(shipping_price)),
        tax_price=_fmt(tax_price),
        total_price=_fmt(total_price),
    )

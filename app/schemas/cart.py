# app/schemas/cart.py
import re
import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

# Whole units with an optional 1-2 digit fraction: "10", "10.5", "10.50"
CURRENCY_RE = re.compile(r"^\d+(\.\d{1,2})?$")


def normalize_currency(value: Any) -> str:
    """
    Coerce a price to a string with exactly two fraction digits.

    Accepts str/int/Decimal and floats (via their repr, never their
    binary value). Raises ValueError on anything that is not a
    non-negative amount with at most two decimals.
    """
    if isinstance(value, bool):
        raise ValueError("Price must be a number")
    if isinstance(value, (int, float, Decimal)):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError("Price must be a number")

    raw = value.strip()
    if not CURRENCY_RE.match(raw):
        raise ValueError("Price must be exactly two decimal places")
    try:
        amount = Decimal(raw)
    except InvalidOperation:
        raise ValueError("Price must be exactly two decimal places")
    return f"{amount:.2f}"


class CartItem(SQLModel):
    """
    One cart line: product id, qty and a snapshot of the product
    at add-time (name, slug, image, price).
    """

    model_config = ConfigDict(extra="forbid")

    product: uuid.UUID
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1)
    qty: int = Field(ge=0)
    image: str = Field(min_length=1)
    price: str

    @field_validator("name", "slug", "image")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v: Any) -> str:
        return normalize_currency(v)


class CartTotals(SQLModel):
    """
    Derived monetary fields of a cart, each with two fraction digits.
    """

    items_price: str
    shipping_price: str
    tax_price: str
    total_price: str


class CartRead(CartTotals):
    """
    Full cart response model.
    """

    id: uuid.UUID
    session_id: str
    user_id: uuid.UUID | None = None
    items: list[CartItem]
    created_at: datetime


class ActionResult(SQLModel):
    """
    Uniform outcome of every cart mutation.
    """

    success: bool
    message: str

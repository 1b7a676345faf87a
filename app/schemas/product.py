# app/schemas/product.py
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import ConfigDict, field_serializer
from sqlmodel import SQLModel


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID
    name: str
    slug: str
    category: str
    brand: str
    description: str | None = None
    images: list[str]
    price: Decimal
    stock: int
    is_featured: bool
    banner: str | None = None
    created_at: datetime

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> str:
        # Same two-digit string form as cart prices
        return f"{price:.2f}"

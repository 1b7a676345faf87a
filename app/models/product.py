# app/models/product.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    The cart only needs id, slug, name and stock from here;
    the rest backs product browsing.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        min_length=3,
        index=True,
        description="Display name of the product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    category: str = Field(max_length=100)
    brand: str = Field(max_length=100)

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    images: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    price: Decimal = Field(
        default=Decimal("0.00"),
        max_digits=12,
        decimal_places=2,
        ge=0,
        description="Unit price",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    is_featured: bool = Field(default=False, index=True)
    banner: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

# app/models/cart.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column, Index, text
from sqlmodel import SQLModel, Field


class Cart(SQLModel, table=True):
    """
    Shopping cart owned by one anonymous session or one user.

    Ownership:
      - user_id IS NULL => anonymous cart, looked up by session_id
      - user_id set     => user cart, looked up by user_id

    `items` holds CartItem payloads (see app.schemas.cart.CartItem);
    always go through CartRepository.read_items / write_items.
    The four price columns are derived from `items` by the pricing engine.

    One cart per owner: user_id is unique, and session_id is unique among
    anonymous carts (a user cart may keep the cookie it was created with).
    """

    __tablename__ = "carts"
    __table_args__ = (
        Index(
            "uq_carts_anonymous_session_id",
            "session_id",
            unique=True,
            sqlite_where=text("user_id IS NULL"),
            postgresql_where=text("user_id IS NULL"),
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    session_id: str = Field(
        index=True,
        description="Anonymous cart cookie value",
    )

    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    items: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    items_price: str = Field(default="0.00", max_length=20)
    shipping_price: str = Field(default="0.00", max_length=20)
    tax_price: str = Field(default="0.00", max_length=20)
    total_price: str = Field(default="0.00", max_length=20)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

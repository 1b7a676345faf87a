"""Shared pytest fixtures: in-memory SQLite store, products, users, services."""
from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

# Settings are read at import time; provide the required ones first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret"

import pytest
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.identity import Identity
from app.models import cart as _cart_models  # noqa: F401
from app.models.product import Product
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.services.cart_service import CartService

TEST_JWT_SECRET = "test-jwt-secret"


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        SQLModel.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture()
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def make_product(session: Session) -> Callable[..., Product]:
    repo = ProductRepository()
    counter = {"n": 0}

    def _make(
        name: str | None = None,
        price: str = "10.00",
        stock: int = 10,
        **extra: Any,
    ) -> Product:
        counter["n"] += 1
        name = name or f"Product {counter['n']}"
        product = Product(
            name=name,
            slug=extra.pop("slug", name.lower().replace(" ", "-")),
            category=extra.pop("category", "Shirts"),
            brand=extra.pop("brand", "Acme"),
            images=extra.pop("images", [f"/images/p{counter['n']}.jpg"]),
            price=Decimal(price),
            stock=stock,
            **extra,
        )
        return repo.create(session, product)

    return _make


@pytest.fixture()
def make_user(session: Session) -> Callable[..., User]:
    def _make(email: str = "jane@example.com") -> User:
        user = User(id=uuid.uuid4(), email=email, name=email.split("@")[0])
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture()
def revalidated() -> list[str]:
    return []


@pytest.fixture()
def cart_service(revalidated: list[str]) -> CartService:
    return CartService(CartRepository(), ProductRepository(), revalidate=revalidated.append)


@pytest.fixture()
def guest() -> Identity:
    return Identity(session_id="guest-cookie-1")


def cart_item(product: Product, qty: int = 1, price: str | None = None) -> dict[str, Any]:
    """Payload the product page sends when adding to cart."""
    return {
        "product": str(product.id),
        "name": product.name,
        "slug": product.slug,
        "qty": qty,
        "image": product.images[0] if product.images else "/images/placeholder.jpg",
        "price": price if price is not None else f"{product.price:.2f}",
    }


def make_token(user_id: uuid.UUID, email: str = "jane@example.com") -> str:
    claims = {
        "sub": str(user_id),
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(hours=1),
    }
    return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session

from app.database import get_session
from app.main import app
from app.models.user import User
from tests.conftest import TEST_JWT_SECRET, cart_item, make_token

API = "/api/v1"


@pytest.fixture()
def client(session: Session):
    def _get_session():
        yield session

    app.dependency_overrides[get_session] = _get_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health_check(client: TestClient) -> None:
    assert client.get("/").json() == {"status": "ok", "service": "storefront-backend"}


def test_guest_gets_cart_cookie_and_empty_cart(client: TestClient) -> None:
    response = client.get(f"{API}/cart")

    assert response.status_code == 200
    assert response.json() is None
    assert "sessionCartId" in response.cookies


def test_guest_add_and_remove_round_trip(client: TestClient, make_product) -> None:
    polo = make_product("Polo Shirt", price="25.00")

    added = client.post(f"{API}/cart/items", json=cart_item(polo))
    again = client.post(f"{API}/cart/items", json=cart_item(polo))
    cart = client.get(f"{API}/cart").json()

    assert added.json() == {"success": True, "message": "Polo Shirt added to cart"}
    assert again.json() == {"success": True, "message": "Polo Shirt quantity updated"}
    assert cart["items"][0]["qty"] == 2
    assert cart["items"][0]["price"] == "25.00"
    assert cart["items_price"] == "50.00"
    assert cart["total_price"] == "67.50"

    removed = client.delete(f"{API}/cart/items/{polo.id}")
    assert removed.json() == {"success": True, "message": "Polo Shirt was removed from cart"}
    assert client.get(f"{API}/cart").json()["items"][0]["qty"] == 1


def test_malformed_item_returns_failure_payload(client: TestClient, make_product) -> None:
    polo = make_product("Polo Shirt")

    response = client.post(f"{API}/cart/items", json=cart_item(polo, qty=-2))

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert "qty" in response.json()["message"]


def test_remove_unknown_item_returns_failure_payload(client: TestClient) -> None:
    response = client.delete(f"{API}/cart/items/{uuid.uuid4()}")

    assert response.json() == {"success": False, "message": "Cart not found"}


def test_merge_requires_authentication(client: TestClient) -> None:
    assert client.post(f"{API}/cart/merge").status_code == 401


def test_invalid_token_is_rejected(client: TestClient) -> None:
    response = client.get(f"{API}/cart", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


def test_sign_in_merges_guest_cart(client: TestClient, session: Session, make_product) -> None:
    polo = make_product("Polo Shirt", price="10.00")
    client.post(f"{API}/cart/items", json=cart_item(polo, qty=2))
    user_id = uuid.uuid4()
    auth = {"Authorization": f"Bearer {make_token(user_id, 'sam@example.com')}"}

    merged = client.post(f"{API}/cart/merge", headers=auth)
    cart = client.get(f"{API}/cart", headers=auth).json()

    assert merged.json()["success"] is True
    assert cart["user_id"] == str(user_id)
    assert cart["items"][0]["qty"] == 2
    assert client.get(f"{API}/cart").json() is None
    # Profile is provisioned from the token on first sight.
    user = session.get(User, user_id)
    assert user.name == "sam"


def test_products_browsing(client: TestClient, make_product) -> None:
    make_product("Polo Shirt", price="59.90")

    listed = client.get(f"{API}/products")
    one = client.get(f"{API}/products/polo-shirt")
    missing = client.get(f"{API}/products/nope")

    assert [p["slug"] for p in listed.json()] == ["polo-shirt"]
    assert one.json()["price"] == "59.90"
    assert missing.status_code == 404


def test_token_without_email_is_rejected(client: TestClient) -> None:
    token = jwt.encode({"sub": str(uuid.uuid4())}, TEST_JWT_SECRET, algorithm="HS256")
    response = client.get(f"{API}/cart", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Token missing sub/email"

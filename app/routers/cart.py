# app/routers/cart.py
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.identity import Identity, get_identity
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import ActionResult, CartRead
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartRead | None)
def get_my_cart(
    session: Session = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Get the caller's cart, or null if they have none yet.

    Signed-in callers get their user cart; guests get the cart
    bound to their cart cookie.
    """
    return service.get_my_cart(session, identity)


@router.post("/items", response_model=ActionResult)
def add_item_to_cart(
    payload: dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Add a product to the cart (or bump its quantity by one).

    The raw item is validated by the service so malformed input comes
    back as {success: false, message} like every other failure.
    """
    return service.add_item(session, identity, payload)


@router.delete("/items/{product_id}", response_model=ActionResult)
def remove_item_from_cart(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    identity: Identity = Depends(get_identity),
):
    """
    Remove one unit of a product from the cart.
    """
    return service.remove_item(session, identity, product_id)


@router.post("/merge", response_model=ActionResult)
def merge_cart(
    session: Session = Depends(get_session),
    identity: Identity = Depends(get_identity),
    current_user: User = Depends(require_auth),
):
    """
    Move the guest cart into the signed-in user's cart.

    Call once right after sign-in / sign-up; later calls are no-ops.
    """
    return service.merge_session_cart(session, identity)

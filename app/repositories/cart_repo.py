# app/repositories/cart_repo.py
import uuid

from pydantic import TypeAdapter
from sqlmodel import Session, col, select

from app.models.cart import Cart
from app.schemas.cart import CartItem, CartTotals

_items_adapter = TypeAdapter(list[CartItem])


class CartRepository:
    """
    Data access layer for Cart.

    - Lookups can lock the row (SELECT ... FOR UPDATE) for
      read-modify-write; stores without row locks ignore it.
    - Writes are staged on the session only. The caller owns the
      transaction and commits once per operation.
    - Items are validated as CartItem on the way in and out.
    """

    # ----- Lookups -----

    def get_by_session_id(
        self,
        session: Session,
        session_id: str,
        for_update: bool = False,
    ) -> Cart | None:
        """Anonymous cart for this cookie value (never a user cart)."""
        stmt = select(Cart).where(
            Cart.session_id == session_id,
            col(Cart.user_id).is_(None),
        )
        if for_update:
            stmt = stmt.with_for_update()
        return session.exec(stmt).first()

    def get_by_user_id(
        self,
        session: Session,
        user_id: uuid.UUID,
        for_update: bool = False,
    ) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        if for_update:
            stmt = stmt.with_for_update()
        return session.exec(stmt).first()

    # ----- Typed item boundary -----

    @staticmethod
    def read_items(cart: Cart) -> list[CartItem]:
        return _items_adapter.validate_python(cart.items or [])

    @staticmethod
    def write_items(cart: Cart, items: list[CartItem], totals: CartTotals) -> None:
        """
        Replace items and totals together; a new list is assigned so the
        JSON column is flagged dirty.
        """
        validated = _items_adapter.validate_python(
            [item.model_dump() for item in items]
        )
        cart.items = [item.model_dump(mode="json") for item in validated]
        cart.items_price = totals.items_price
        cart.shipping_price = totals.shipping_price
        cart.tax_price = totals.tax_price
        cart.total_price = totals.total_price

    # ----- Staged writes -----

    def create(
        self,
        session: Session,
        *,
        session_id: str,
        user_id: uuid.UUID | None,
        items: list[CartItem],
        totals: CartTotals,
    ) -> Cart:
        cart = Cart(session_id=session_id, user_id=user_id)
        self.write_items(cart, items, totals)
        session.add(cart)
        return cart

    def update(
        self,
        session: Session,
        cart: Cart,
        items: list[CartItem],
        totals: CartTotals,
    ) -> Cart:
        self.write_items(cart, items, totals)
        session.add(cart)
        return cart

    def assign_to_user(self, session: Session, cart: Cart, user_id: uuid.UUID) -> Cart:
        cart.user_id = user_id
        session.add(cart)
        return cart

    def delete(self, session: Session, cart: Cart) -> None:
        session.delete(cart)

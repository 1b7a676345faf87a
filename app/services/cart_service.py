# app/services/cart_service.py
import logging
import uuid
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.core.exceptions import (
    CartError,
    InsufficientStockError,
    NotFoundError,
    StoreError,
    ValidationError,
    format_error,
    validation_messages,
)
from app.core.identity import Identity
from app.core.revalidation import product_path, revalidate_path
from app.models.cart import Cart
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import ActionResult, CartItem, CartRead
from app.services.pricing import calc_price

logger = logging.getLogger(__name__)


def merge_items(user_items: list[CartItem], session_items: list[CartItem]) -> list[CartItem]:
    """
    Combine two carts' lines by product.

    User lines keep their order and snapshot; quantities of products in
    both carts are summed; session-only lines are appended in order.
    """
    by_product: dict[uuid.UUID, CartItem] = {}
    for item in user_items:
        by_product[item.product] = item.model_copy()
    for item in session_items:
        existing = by_product.get(item.product)
        if existing is not None:
            by_product[item.product] = existing.model_copy(
                update={"qty": existing.qty + item.qty}
            )
        else:
            by_product[item.product] = item.model_copy()
    return list(by_product.values())


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - resolve the caller's cart from an explicit Identity
      - validate incoming items and product stock
      - keep totals in sync with items via the pricing engine
      - merge an anonymous cart into the user's cart after sign-in

    Every mutation runs in one transaction and never raises: failures
    come back as ActionResult(success=False, message=...).
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        revalidate: Callable[[str], None] = revalidate_path,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.revalidate = revalidate

    # ---- internal helpers ----

    def _find_cart(
        self,
        session: Session,
        identity: Identity,
        for_update: bool = False,
    ) -> Cart | None:
        # Authenticated identity wins over any leftover cookie.
        if identity.user_id is not None:
            return self.cart_repo.get_by_user_id(
                session, identity.user_id, for_update=for_update
            )
        if not identity.session_id:
            return None
        return self.cart_repo.get_by_session_id(
            session, identity.session_id, for_update=for_update
        )

    @staticmethod
    def _parse_item(data: CartItem | dict[str, Any]) -> CartItem:
        if isinstance(data, CartItem):
            data = data.model_dump()
        try:
            return CartItem.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(validation_messages(exc)) from exc

    def _run(
        self,
        session: Session,
        action: str,
        operation: Callable[[], tuple[str, str | None]],
    ) -> ActionResult:
        """
        Execute `operation` as one transaction.

        `operation` returns (message, stale page path or None). Commits on
        success, then emits the revalidation signal; rolls back and converts
        the exception into a failed ActionResult otherwise.
        """
        try:
            try:
                message, stale_path = operation()
                session.commit()
            except SQLAlchemyError as exc:
                raise StoreError(format_error(exc)) from exc
        except CartError as exc:
            session.rollback()
            logger.warning("Cart %s failed: %s", action, exc.message)
            return ActionResult(success=False, message=format_error(exc))
        except Exception as exc:
            session.rollback()
            logger.exception("Cart %s failed unexpectedly", action)
            return ActionResult(success=False, message=format_error(exc))

        if stale_path:
            self.revalidate(stale_path)
        return ActionResult(success=True, message=message)

    # ---- public operations ----

    def get_my_cart(self, session: Session, identity: Identity) -> CartRead | None:
        """
        Return the caller's cart, or None if they have none.
        """
        cart = self._find_cart(session, identity)
        if cart is None:
            return None
        return CartRead(
            id=cart.id,
            session_id=cart.session_id,
            user_id=cart.user_id,
            items=self.cart_repo.read_items(cart),
            items_price=cart.items_price,
            shipping_price=cart.shipping_price,
            tax_price=cart.tax_price,
            total_price=cart.total_price,
            created_at=cart.created_at,
        )

    def add_item(
        self,
        session: Session,
        identity: Identity,
        data: CartItem | dict[str, Any],
    ) -> ActionResult:
        """
        Add one product to the caller's cart.

        Rules:
          - item must match the CartItem schema
          - product must exist
          - new cart: created with [item] (stock >= item.qty)
          - product already in cart: qty + 1 (stock >= new qty)
          - otherwise: line appended (stock >= item.qty)
        """

        def operation() -> tuple[str, str | None]:
            item = self._parse_item(data)

            product = self.product_repo.get_by_id(session, item.product)
            if product is None:
                raise NotFoundError("Product not found")

            cart = self._find_cart(session, identity, for_update=True)

            if cart is None:
                if product.stock < item.qty:
                    raise InsufficientStockError("Not enough stock")
                items = [item]
                self.cart_repo.create(
                    session,
                    session_id=identity.session_id or str(uuid.uuid4()),
                    user_id=identity.user_id,
                    items=items,
                    totals=calc_price(items),
                )
                message = f"{product.name} added to cart"
            else:
                items = self.cart_repo.read_items(cart)
                idx = next(
                    (i for i, x in enumerate(items) if x.product == item.product),
                    None,
                )
                if idx is not None:
                    new_qty = items[idx].qty + 1
                    if product.stock < new_qty:
                        raise InsufficientStockError("Not enough stock")
                    items[idx] = items[idx].model_copy(update={"qty": new_qty})
                    message = f"{product.name} quantity updated"
                else:
                    if product.stock < item.qty:
                        raise InsufficientStockError("Not enough stock")
                    items.append(item)
                    message = f"{product.name} added to cart"

                self.cart_repo.update(session, cart, items, calc_price(items))

            return message, product_path(product.slug)

        return self._run(session, "add", operation)

    def remove_item(
        self,
        session: Session,
        identity: Identity,
        product_id: uuid.UUID,
    ) -> ActionResult:
        """
        Remove one unit of a product from the caller's cart.

        The line disappears when its last unit is removed; the cart
        record itself is deleted once it has no lines left.
        """

        def operation() -> tuple[str, str | None]:
            cart = self._find_cart(session, identity, for_update=True)
            if cart is None:
                raise NotFoundError("Cart not found")

            items = self.cart_repo.read_items(cart)
            existing = next((x for x in items if x.product == product_id), None)
            if existing is None:
                raise NotFoundError("Item not found")

            if existing.qty <= 1:
                items = [x for x in items if x.product != product_id]
            else:
                items = [
                    x.model_copy(update={"qty": x.qty - 1})
                    if x.product == product_id
                    else x
                    for x in items
                ]

            if items:
                self.cart_repo.update(session, cart, items, calc_price(items))
            else:
                self.cart_repo.delete(session, cart)

            return f"{existing.name} was removed from cart", product_path(existing.slug)

        return self._run(session, "remove", operation)

    def merge_session_cart(self, session: Session, identity: Identity) -> ActionResult:
        """
        Fold the anonymous cart of `identity.session_id` into the user's cart.

        Called once right after sign-in/sign-up:
          - no anonymous cart   -> nothing to do
          - no user cart yet    -> anonymous cart now belongs to the user
          - both exist          -> quantities summed per product, totals
                                   recomputed, anonymous cart deleted
        """

        def operation() -> tuple[str, str | None]:
            if identity.user_id is None:
                raise ValidationError("Sign in to merge carts")

            session_cart = (
                self.cart_repo.get_by_session_id(
                    session, identity.session_id, for_update=True
                )
                if identity.session_id
                else None
            )
            if session_cart is None:
                return "No cart to merge", None

            user_cart = self.cart_repo.get_by_user_id(
                session, identity.user_id, for_update=True
            )
            if user_cart is None:
                self.cart_repo.assign_to_user(session, session_cart, identity.user_id)
                logger.info(
                    "Cart %s claimed by user %s", session_cart.id, identity.user_id
                )
                return "Cart saved to your account", None

            merged = merge_items(
                self.cart_repo.read_items(user_cart),
                self.cart_repo.read_items(session_cart),
            )
            self.cart_repo.update(session, user_cart, merged, calc_price(merged))
            self.cart_repo.delete(session, session_cart)
            logger.info(
                "Cart %s merged into cart %s", session_cart.id, user_cart.id
            )
            return "Cart merged", None

        return self._run(session, "merge", operation)

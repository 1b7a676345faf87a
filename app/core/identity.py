# app/core/identity.py
import uuid

from fastapi import Depends, Request, Response
from pydantic import BaseModel

from app.core.auth import get_current_user
from app.core.config import get_settings
from app.models.user import User

settings = get_settings()


class Identity(BaseModel):
    """
    Who a cart operation acts for.

    session_id: anonymous cart cookie value (always present over HTTP)
    user_id:    authenticated user, if any
    """

    session_id: str
    user_id: uuid.UUID | None = None


def new_session_cart_id() -> str:
    return str(uuid.uuid4())


def get_identity(
    request: Request,
    response: Response,
    user: User | None = Depends(get_current_user),
) -> Identity:
    """
    FastAPI dependency combining the cart cookie with the optional user.

    A fresh cart cookie is issued on the first request that lacks one.
    """
    session_id = request.cookies.get(settings.CART_COOKIE_NAME)
    if not session_id:
        session_id = new_session_cart_id()
        response.set_cookie(
            key=settings.CART_COOKIE_NAME,
            value=session_id,
            max_age=settings.CART_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
            secure=settings.CART_COOKIE_SECURE,
            path="/",
        )
    return Identity(session_id=session_id, user_id=user.id if user else None)

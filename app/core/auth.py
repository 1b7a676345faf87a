# app/core/auth.py
import logging
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session, select

from app.core.config import get_settings
from app.database import get_session
from app.models.user import User

settings = get_settings()
logger = logging.getLogger(__name__)

# Guests shop without a token, so a missing header is not an error here.
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a shopper's access token and return its claims.

    Tokens are issued by the sign-in service and signed with the shared
    JWT_SECRET (JWT_ALG, HS256 by default). Expiry is checked; audience
    is not, since the storefront is the only consumer.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise _unauthorized("Invalid or expired token")


def _shopper_from_claims(claims: dict[str, Any]) -> tuple[uuid.UUID, str]:
    """Pull (user id, email) out of the token; both are required."""
    sub = claims.get("sub")
    email = claims.get("email")
    if not sub or not email:
        raise _unauthorized("Token missing sub/email")
    try:
        return uuid.UUID(str(sub)), email
    except ValueError:
        raise _unauthorized("Invalid sub in token")


def _default_name_from_email(email: str) -> str:
    # "jane@example.com" -> "jane", as shown in the storefront header
    return email.split("@", 1)[0][:50] if "@" in email else email[:50]


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    The signed-in shopper, or None for a guest.

    A shopper seen for the first time (fresh sign-up) gets a profile row
    so their cart can reference it.
    """
    if credentials is None:
        return None

    user_id, email = _shopper_from_claims(
        decode_access_token(credentials.credentials)
    )

    user = session.exec(select(User).where(User.id == user_id)).first()
    if user is None:
        user = User(id=user_id, email=email, name=_default_name_from_email(email))
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.info("Provisioned shopper profile %s", user.id)

    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Reject guests with 401; used by the cart merge endpoint.
    """
    if user is None:
        raise _unauthorized("Authentication required")
    return user

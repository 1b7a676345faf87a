# app/core/exceptions.py
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class CartError(Exception):
    """
    Base class for cart domain failures.

    `message` is always safe to show to the shopper.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CartError):
    """Malformed cart item or request."""


class NotFoundError(CartError):
    """Missing product, cart or cart line."""


class InsufficientStockError(CartError):
    """Requested quantity exceeds available stock."""


class StoreError(CartError):
    """Underlying persistence failure."""


def validation_messages(exc: PydanticValidationError) -> str:
    """
    Flatten pydantic errors into one sentence list:
    "qty: Input should be greater than or equal to 0. price: ..."
    """
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return ". ".join(parts)


def format_error(exc: BaseException) -> str:
    """
    Turn any exception into the human-readable text returned to callers.
    """
    if isinstance(exc, CartError):
        return exc.message
    if isinstance(exc, PydanticValidationError):
        return validation_messages(exc)
    if isinstance(exc, IntegrityError):
        return "Record already exists"
    if isinstance(exc, SQLAlchemyError):
        return "Database error"
    # Unexpected failures keep their detail in the logs only.
    return "Something went wrong"

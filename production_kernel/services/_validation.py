"""Field validation shared by the inventory collaborator services."""

from decimal import Decimal, InvalidOperation
from uuid import UUID

from production_kernel.exceptions import (
    InvalidFieldError,
    InvalidQuantityError,
    MissingProductReferenceError,
    ProductNotFoundError,
)
from production_kernel.services.base import parse_uuid

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
UNIT_MAX_LENGTH = 20
MIN_PRICE = Decimal("0.01")
_CENTS = Decimal("0.01")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_name(value: object) -> str:
    if not isinstance(value, str):
        raise InvalidFieldError("name", value, "must be a string")
    name = value.strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidFieldError(
            "name", value,
            f"must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
        )
    return name


def validate_description(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidFieldError("description", value, "must be a string")
    if len(value) > DESCRIPTION_MAX_LENGTH:
        raise InvalidFieldError(
            "description", value,
            f"must be at most {DESCRIPTION_MAX_LENGTH} characters",
        )
    return value


def validate_price(value: object) -> Decimal:
    """Prices are at least 0.01 and stored with two decimal places."""
    if isinstance(value, bool) or value is None:
        raise InvalidFieldError("price", value, "must be a decimal amount")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise InvalidFieldError("price", value, "must be a decimal amount") from None
    if not price.is_finite() or price < MIN_PRICE:
        raise InvalidFieldError("price", value, f"must be at least {MIN_PRICE}")
    return price.quantize(_CENTS)


def validate_stock_quantity(value: object) -> int:
    if not _is_int(value) or value < 0:
        raise InvalidFieldError(
            "stock_quantity", value, "must be a non-negative integer",
        )
    return value


def validate_unit(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidFieldError("unit", value, "must be a non-empty string")
    if len(value) > UNIT_MAX_LENGTH:
        raise InvalidFieldError(
            "unit", value, f"must be at most {UNIT_MAX_LENGTH} characters",
        )
    return value


def validate_quantity_needed(value: object) -> int:
    if not _is_int(value) or value < 1:
        raise InvalidFieldError(
            "quantity_needed", value, "must be an integer of at least 1",
        )
    return value


def validate_requested_quantity(value: object) -> int:
    """Settlement quantities must be positive integers."""
    if not _is_int(value) or value <= 0:
        raise InvalidQuantityError(value)
    return value


def require_product_reference(value: UUID | str | None) -> UUID:
    """
    Resolve a caller-supplied product reference.

    Raises:
        MissingProductReferenceError: nothing was supplied.
        ProductNotFoundError: the value cannot identify any product.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingProductReferenceError()
    product_id = parse_uuid(value)
    if product_id is None:
        raise ProductNotFoundError(value)
    return product_id

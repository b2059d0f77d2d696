"""
Input checks for products, sales and list paging.

Everything here is pure: no I/O, no database access.
"""
import math
from typing import Any, List, Optional, Tuple

from bazar.models.product import PRODUCT_STATUSES
from bazar.services.exceptions import ValidationError

DEFAULT_PAGE = 1
# largest id/quantity SQLite can store (signed 64-bit)
MAX_DB_INT = 2 ** 63 - 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


def _is_number(value: Any) -> bool:
    # bool is an int subclass; True must not pass for a price
    if isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= MAX_DB_INT


def to_number(value: Any) -> Optional[float]:
    """Parse a form/JSON price into a float, or None when it is not numeric."""
    if _is_number(value):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def validate_product(name: Any, price: Any, description: Any = None) -> List[str]:
    errors = []
    if not isinstance(name, str) or len(name.strip()) < 2:
        errors.append("name must have at least 2 characters")
    if price is None or (isinstance(price, str) and not price.strip()):
        errors.append("price is required")
    else:
        parsed = to_number(price)
        if parsed is None:
            errors.append("price must be a number")
        elif parsed < 0:
            errors.append("price must be greater than or equal to 0")
    if description is not None and not isinstance(description, str):
        errors.append("description must be a string")
    return errors


def validate_sale(product_id: Any, quantity: Any, total: Any) -> None:
    """Raise ValidationError for the first failing rule, in field order."""
    if not _is_positive_int(product_id):
        raise ValidationError("productId must be a positive integer")
    if not _is_positive_int(quantity):
        raise ValidationError("quantity must be a positive integer")
    if not _is_number(total) or total < 0:
        raise ValidationError("total must be a number greater than or equal to 0")


def validate_status(status: Optional[str]) -> Optional[str]:
    if status is None or status == "":
        return None
    if status not in PRODUCT_STATUSES:
        raise ValidationError(
            "status must be one of: " + ", ".join(PRODUCT_STATUSES)
        )
    return status


def _to_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_paging(page: Any = None, limit: Any = None) -> Tuple[int, int, int]:
    """
    Normalize page/limit query values.

    Returns (page, limit, offset): page is at least 1, limit is clamped to
    [1, MAX_LIMIT], and unparsable values fall back to the defaults.
    """
    # keep offset inside the range SQLite accepts
    page = min(MAX_DB_INT // MAX_LIMIT, max(1, _to_int(page, DEFAULT_PAGE)))
    limit = min(MAX_LIMIT, max(1, _to_int(limit, DEFAULT_LIMIT)))
    return page, limit, (page - 1) * limit


def parse_id(value: Any) -> Optional[int]:
    """Path ids: a storable positive integer, or None for anything else."""
    parsed = _to_int(value, 0) if isinstance(value, str) and value.strip().isdigit() else value
    return parsed if _is_positive_int(parsed) else None

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from ..core.exceptions import ValidationError

Number = Union[str, int, float, Decimal]


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def parse_decimal(value: Optional[Number]) -> Optional[Decimal]:
    """Parse a number-like input into Decimal, None when it is blank or not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        # str() first so floats keep their printed value (0.1 -> Decimal("0.1"))
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def require_positive_amount(value: Optional[Number], field_name: str) -> Decimal:
    amount = parse_decimal(value)
    if amount is None:
        raise ValidationError(f"{field_name} must be a number")
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return amount


def optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None

"""Pure fee arithmetic: scholarship normalization, amount due and settlement status."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

from ..common.validators import optional_text, parse_decimal
from ..core.constants import MAX_SCHOLARSHIP_PERCENTAGE
from ..core.enums import FeeStatus, ScholarshipType
from ..core.exceptions import ValidationError
from .model import ScholarshipInfo, quantize_money

RawPercentage = Union[str, int, float, Decimal, None]


def _coerce_type(value) -> Optional[ScholarshipType]:
    if value is None or value == "":
        return None
    try:
        return ScholarshipType(value)
    except ValueError:
        return None


def _valid_percentage(value: Optional[Decimal]) -> bool:
    return value is not None and Decimal("0") < value <= MAX_SCHOLARSHIP_PERCENTAGE


class ScholarshipCalculator:
    """Turns raw form input into ScholarshipInfo and applies it to a fee."""

    @staticmethod
    def normalize(
        has_scholarship: bool,
        type: Union[ScholarshipType, str, None] = None,
        raw_percentage: RawPercentage = None,
        raw_description: Optional[str] = None,
    ) -> ScholarshipInfo:
        """Lenient normalization: invalid or absent percentages are dropped, not rejected."""
        if not has_scholarship:
            return ScholarshipInfo(has_scholarship=False)

        scholarship_type = _coerce_type(type)
        percentage = None
        if scholarship_type == ScholarshipType.PARTIAL:
            parsed = parse_decimal(raw_percentage)
            if _valid_percentage(parsed):
                percentage = parsed

        return ScholarshipInfo(
            has_scholarship=True,
            type=scholarship_type,
            percentage=percentage,
            description=optional_text(raw_description),
        )

    @classmethod
    def normalize_strict(
        cls,
        has_scholarship: bool,
        type: Union[ScholarshipType, str, None] = None,
        raw_percentage: RawPercentage = None,
        raw_description: Optional[str] = None,
    ) -> ScholarshipInfo:
        """Same as normalize() but rejects an unknown type or a bad partial percentage."""
        if has_scholarship:
            scholarship_type = _coerce_type(type)
            if scholarship_type is None:
                raise ValidationError(f"Unknown scholarship type: {type!r}")
            if scholarship_type == ScholarshipType.PARTIAL and not _valid_percentage(parse_decimal(raw_percentage)):
                raise ValidationError("Scholarship percentage must be greater than 0 and at most 100")
        return cls.normalize(has_scholarship, type, raw_percentage, raw_description)

    @staticmethod
    def amount_due(total_fees: Decimal, scholarship: ScholarshipInfo) -> Decimal:
        if not scholarship.has_scholarship:
            return total_fees
        if scholarship.type == ScholarshipType.FULL:
            return Decimal("0")
        if scholarship.type == ScholarshipType.PARTIAL and scholarship.percentage:
            return quantize_money(total_fees * (1 - scholarship.percentage / 100))
        # partial without a recorded percentage: no discount
        return total_fees


def derive_status(amount_due: Decimal, amount_paid: Decimal) -> FeeStatus:
    balance = amount_due - amount_paid
    if balance <= 0:
        return FeeStatus.PAID
    if amount_paid > 0:
        return FeeStatus.PARTIAL
    return FeeStatus.UNPAID

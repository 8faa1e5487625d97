from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from ..common.validators import parse_decimal, require_non_empty
from ..core.constants import DEFAULT_CURRENCY, MAX_FEE_AMOUNT, MIN_INSTALLMENTS, MONEY_QUANTUM
from ..core.enums import FeeStatus, PaymentMethod, PaymentPlan, ScholarshipType
from ..core.exceptions import ValidationError


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def _installment_count(value) -> int:
    parsed = parse_decimal(value)
    if parsed is None or parsed != parsed.to_integral_value():
        raise ValidationError("Installment count must be a whole number")
    if parsed < MIN_INSTALLMENTS:
        raise ValidationError(f"Installment plans need at least {MIN_INSTALLMENTS} installments")
    return int(parsed)


@dataclass(frozen=True)
class Installments:
    count: int
    amount_per_installment: Decimal


@dataclass(frozen=True)
class FeeStructure:
    """Full fee agreed at enrollment. Not changed once a ledger record exists."""

    full_amount: Decimal
    currency: str = DEFAULT_CURRENCY
    payment_plan: PaymentPlan = PaymentPlan.FULL
    installments: Optional[Installments] = None

    @classmethod
    def create(
        cls,
        *,
        full_amount: Union[str, int, float, Decimal],
        currency: str = DEFAULT_CURRENCY,
        payment_plan: Union[PaymentPlan, str] = PaymentPlan.FULL,
        installment_count: Optional[int] = None,
    ) -> "FeeStructure":
        amount = parse_decimal(full_amount)
        if amount is None or amount <= 0:
            raise ValidationError("Full fee amount must be greater than 0")
        if amount > MAX_FEE_AMOUNT:
            raise ValidationError(f"Full fee amount must be at most {MAX_FEE_AMOUNT}")

        try:
            plan = PaymentPlan(payment_plan)
        except ValueError:
            raise ValidationError(f"Unknown payment plan: {payment_plan!r}")

        installments = None
        if plan == PaymentPlan.INSTALLMENT:
            count = _installment_count(installment_count)
            installments = Installments(
                count=count,
                amount_per_installment=quantize_money(amount / count),
            )

        return cls(
            full_amount=amount,
            currency=require_non_empty(currency, "Currency").upper(),
            payment_plan=plan,
            installments=installments,
        )


@dataclass(frozen=True)
class ScholarshipInfo:
    has_scholarship: bool = False
    type: Optional[ScholarshipType] = None
    percentage: Optional[Decimal] = None
    description: Optional[str] = None

    @property
    def is_full(self) -> bool:
        return self.has_scholarship and self.type == ScholarshipType.FULL


@dataclass(frozen=True)
class PaymentRecord:
    """One hand-entered payment. Never edited after it is appended."""

    id: str
    amount: Decimal
    date: datetime
    method: PaymentMethod
    recorded_by: str
    recorded_by_name: str
    reference: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class NewPayment:
    """Payment data supplied by the caller; id and date are assigned by the ledger."""

    amount: Union[str, int, float, Decimal]
    method: Union[PaymentMethod, str]
    recorded_by: str
    recorded_by_name: str
    reference: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class StudentFeeRecord:
    student_id: str
    student_name: str
    cohort: str
    email: str
    fee_structure: FeeStructure
    scholarship: ScholarshipInfo
    total_fees: Decimal
    amount_due: Decimal
    amount_paid: Decimal
    balance: Decimal
    status: FeeStatus
    enrollment_date: datetime
    created_at: datetime
    updated_at: datetime
    payments: tuple[PaymentRecord, ...] = ()
    expected_completion_date: Optional[datetime] = None
    last_payment_date: Optional[datetime] = None
    updated_by: Optional[str] = None
    version: int = 1


@dataclass(frozen=True)
class FeeStatistics:
    total_students: int = 0
    total_fees_expected: Decimal = Decimal("0")
    total_collected: Decimal = Decimal("0")
    total_outstanding: Decimal = Decimal("0")
    collection_rate: Decimal = Decimal("0")
    paid_count: int = 0
    partial_count: int = 0
    unpaid_count: int = 0
    overdue_count: int = 0
    scholarship_count: int = 0
    full_scholarship_count: int = 0

    def to_dict(self) -> dict:
        return {
            "totalStudents": self.total_students,
            "totalFeesExpected": float(self.total_fees_expected),
            "totalCollected": float(self.total_collected),
            "totalOutstanding": float(self.total_outstanding),
            "collectionRate": float(self.collection_rate),
            "paidCount": self.paid_count,
            "partialCount": self.partial_count,
            "unpaidCount": self.unpaid_count,
            "overdueCount": self.overdue_count,
            "scholarshipCount": self.scholarship_count,
            "fullScholarshipCount": self.full_scholarship_count,
        }

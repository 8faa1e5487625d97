from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from ..common.datetime_utils import now_utc
from ..common.validators import optional_text, require_non_empty, require_positive_amount
from ..core.constants import PAYMENT_ID_PREFIX, PAYMENT_ID_RANDOM_LENGTH
from ..core.enums import PaymentMethod, ScholarshipType
from ..core.exceptions import AlreadyExistsError, NotFoundError, ValidationError
from .calculator import ScholarshipCalculator, derive_status
from .model import FeeStructure, NewPayment, PaymentRecord, ScholarshipInfo, StudentFeeRecord
from .repository import FeeRecordRepository
from .signals import payment_recorded

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class RawScholarship:
    """Scholarship terms as they arrive from a form."""

    has_scholarship: bool = False
    type: Union[ScholarshipType, str, None] = None
    percentage: Union[str, int, float, Decimal, None] = None
    description: Optional[str] = None


def new_payment_id(now: datetime) -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(PAYMENT_ID_RANDOM_LENGTH))
    return f"{PAYMENT_ID_PREFIX}_{int(now.timestamp() * 1000)}_{suffix}"


class FeeService:
    """Use cases that write the fee ledger: initialize, change scholarship, record payment.

    Every write to an existing record goes through FeeRecordRepository.modify(),
    so the recomputation always starts from the latest stored amounts.
    """

    def __init__(self, fees: FeeRecordRepository, *, calculator: Optional[ScholarshipCalculator] = None):
        self._fees = fees
        self._calculator = calculator or ScholarshipCalculator()

    def _scholarship(self, raw: Optional[RawScholarship]) -> ScholarshipInfo:
        raw = raw or RawScholarship()
        return self._calculator.normalize_strict(
            bool(raw.has_scholarship),
            raw.type,
            raw.percentage,
            raw.description,
        )

    def initialize(
        self,
        *,
        student_id: str,
        student_name: str,
        cohort: str,
        email: str,
        fee_structure: FeeStructure,
        scholarship: Optional[RawScholarship] = None,
        enrollment_date: Optional[datetime] = None,
        expected_completion_date: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> StudentFeeRecord:
        now = now or now_utc()
        student_id = require_non_empty(student_id, "Student")
        info = self._scholarship(scholarship)

        total_fees = fee_structure.full_amount
        amount_due = self._calculator.amount_due(total_fees, info)
        amount_paid = Decimal("0")

        record = StudentFeeRecord(
            student_id=student_id,
            student_name=require_non_empty(student_name, "Student name"),
            cohort=require_non_empty(cohort, "Cohort"),
            email=require_non_empty(email, "Email"),
            fee_structure=fee_structure,
            scholarship=info,
            total_fees=total_fees,
            amount_due=amount_due,
            amount_paid=amount_paid,
            balance=amount_due - amount_paid,
            status=derive_status(amount_due, amount_paid),
            enrollment_date=enrollment_date or now,
            expected_completion_date=expected_completion_date,
            created_at=now,
            updated_at=now,
        )

        if not self._fees.create(record):
            raise AlreadyExistsError(f"Fee record already exists for student {student_id}")

        logger.info("Initialized fee record for %s: amount due %s %s", student_id, amount_due, fee_structure.currency)
        return record

    def update_scholarship(
        self,
        student_id: str,
        scholarship: RawScholarship,
        *,
        updated_by: str,
        now: Optional[datetime] = None,
    ) -> StudentFeeRecord:
        now = now or now_utc()
        info = self._scholarship(scholarship)
        updated_by = require_non_empty(updated_by, "Updated by")

        def apply(current: StudentFeeRecord) -> dict:
            amount_due = self._calculator.amount_due(current.total_fees, info)
            return {
                "scholarship": info,
                "amount_due": amount_due,
                "balance": amount_due - current.amount_paid,
                "status": derive_status(amount_due, current.amount_paid),
                "updated_at": now,
                "updated_by": updated_by,
            }

        record = self._fees.modify(student_id, apply)
        if record is None:
            raise NotFoundError(f"Student fee record not found: {student_id}")

        logger.info("Scholarship updated for %s by %s: amount due %s, status %s", student_id, updated_by, record.amount_due, record.status.value)
        return record

    def record_payment(
        self,
        student_id: str,
        payment: NewPayment,
        *,
        now: Optional[datetime] = None,
    ) -> tuple[StudentFeeRecord, PaymentRecord]:
        now = now or now_utc()
        amount = require_positive_amount(payment.amount, "Payment amount")
        try:
            method = PaymentMethod(payment.method)
        except ValueError:
            raise ValidationError(f"Unknown payment method: {payment.method!r}")

        entry = PaymentRecord(
            id=new_payment_id(now),
            amount=amount,
            date=now,
            method=method,
            recorded_by=require_non_empty(payment.recorded_by, "Recorded by"),
            recorded_by_name=require_non_empty(payment.recorded_by_name, "Recorded by name"),
            reference=optional_text(payment.reference),
            notes=optional_text(payment.notes),
        )

        def apply(current: StudentFeeRecord) -> dict:
            amount_paid = current.amount_paid + entry.amount
            return {
                "payments": current.payments + (entry,),
                "amount_paid": amount_paid,
                "balance": current.amount_due - amount_paid,
                "status": derive_status(current.amount_due, amount_paid),
                "last_payment_date": now,
                "updated_at": now,
                "updated_by": entry.recorded_by,
            }

        record = self._fees.modify(student_id, apply)
        if record is None:
            raise NotFoundError(f"Student fee record not found: {student_id}")

        logger.info(
            "Recorded payment %s for %s: %s %s, balance %s, status %s",
            entry.id,
            student_id,
            record.fee_structure.currency,
            entry.amount,
            record.balance,
            record.status.value,
        )

        # The write has committed; receivers must not turn it into a failure.
        try:
            payment_recorded.send(self, record=record, payment=entry)
        except Exception:
            logger.exception("payment_recorded receiver failed for %s", entry.id)

        return record, entry

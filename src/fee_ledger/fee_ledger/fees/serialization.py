"""Convert fee records to/from the JSON documents kept by the stores.

Absent optional fields are left out of the document instead of being written as null.
Decimals travel as strings and datetimes as ISO-8601.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_datetime
from ..core.enums import FeeStatus, PaymentMethod, PaymentPlan, ScholarshipType
from .model import FeeStructure, Installments, PaymentRecord, ScholarshipInfo, StudentFeeRecord


def _money(value: Decimal) -> str:
    return str(value)


def _put(doc: dict, key: str, value: Any) -> None:
    if value is not None:
        doc[key] = value


def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _opt_dt(value: Optional[str]) -> Optional[datetime]:
    return parse_iso_datetime(value) if value else None


def fee_structure_to_doc(fs: FeeStructure) -> dict:
    doc = {
        "fullAmount": _money(fs.full_amount),
        "currency": fs.currency,
        "paymentPlan": fs.payment_plan.value,
    }
    if fs.installments:
        doc["installments"] = {
            "count": fs.installments.count,
            "amountPerInstallment": _money(fs.installments.amount_per_installment),
        }
    return doc


def scholarship_to_doc(info: ScholarshipInfo) -> dict:
    doc: dict = {"hasScholarship": info.has_scholarship}
    if not info.has_scholarship:
        return doc
    _put(doc, "type", info.type.value if info.type else None)
    _put(doc, "percentage", _money(info.percentage) if info.percentage is not None else None)
    _put(doc, "description", info.description)
    return doc


def payment_to_doc(p: PaymentRecord) -> dict:
    doc = {
        "id": p.id,
        "amount": _money(p.amount),
        "date": _dt(p.date),
        "method": p.method.value,
        "recordedBy": p.recorded_by,
        "recordedByName": p.recorded_by_name,
    }
    _put(doc, "reference", p.reference)
    _put(doc, "notes", p.notes)
    return doc


def record_to_doc(r: StudentFeeRecord) -> dict:
    doc = {
        "studentId": r.student_id,
        "studentName": r.student_name,
        "cohort": r.cohort,
        "email": r.email,
        "feeStructure": fee_structure_to_doc(r.fee_structure),
        "scholarship": scholarship_to_doc(r.scholarship),
        "totalFees": _money(r.total_fees),
        "amountDue": _money(r.amount_due),
        "amountPaid": _money(r.amount_paid),
        "balance": _money(r.balance),
        "payments": [payment_to_doc(p) for p in r.payments],
        "status": r.status.value,
        "enrollmentDate": _dt(r.enrollment_date),
        "createdAt": _dt(r.created_at),
        "updatedAt": _dt(r.updated_at),
        "version": r.version,
    }
    _put(doc, "expectedCompletionDate", _dt(r.expected_completion_date))
    _put(doc, "lastPaymentDate", _dt(r.last_payment_date))
    _put(doc, "updatedBy", r.updated_by)
    return doc


def fee_structure_from_doc(doc: dict) -> FeeStructure:
    inst = doc.get("installments")
    return FeeStructure(
        full_amount=Decimal(doc["fullAmount"]),
        currency=doc["currency"],
        payment_plan=PaymentPlan(doc["paymentPlan"]),
        installments=Installments(
            count=int(inst["count"]),
            amount_per_installment=Decimal(inst["amountPerInstallment"]),
        )
        if inst
        else None,
    )


def scholarship_from_doc(doc: dict) -> ScholarshipInfo:
    if not doc.get("hasScholarship"):
        return ScholarshipInfo(has_scholarship=False)
    return ScholarshipInfo(
        has_scholarship=True,
        type=ScholarshipType(doc["type"]) if doc.get("type") else None,
        percentage=Decimal(doc["percentage"]) if doc.get("percentage") is not None else None,
        description=doc.get("description"),
    )


def payment_from_doc(doc: dict) -> PaymentRecord:
    return PaymentRecord(
        id=doc["id"],
        amount=Decimal(doc["amount"]),
        date=parse_iso_datetime(doc["date"]),
        method=PaymentMethod(doc["method"]),
        recorded_by=doc["recordedBy"],
        recorded_by_name=doc["recordedByName"],
        reference=doc.get("reference"),
        notes=doc.get("notes"),
    )


def record_from_doc(doc: dict) -> StudentFeeRecord:
    return StudentFeeRecord(
        student_id=doc["studentId"],
        student_name=doc["studentName"],
        cohort=doc["cohort"],
        email=doc["email"],
        fee_structure=fee_structure_from_doc(doc["feeStructure"]),
        scholarship=scholarship_from_doc(doc["scholarship"]),
        total_fees=Decimal(doc["totalFees"]),
        amount_due=Decimal(doc["amountDue"]),
        amount_paid=Decimal(doc["amountPaid"]),
        balance=Decimal(doc["balance"]),
        payments=tuple(payment_from_doc(p) for p in doc.get("payments", [])),
        status=FeeStatus(doc["status"]),
        enrollment_date=parse_iso_datetime(doc["enrollmentDate"]),
        created_at=parse_iso_datetime(doc["createdAt"]),
        updated_at=parse_iso_datetime(doc["updatedAt"]),
        expected_completion_date=_opt_dt(doc.get("expectedCompletionDate")),
        last_payment_date=_opt_dt(doc.get("lastPaymentDate")),
        updated_by=doc.get("updatedBy"),
        version=int(doc.get("version", 1)),
    )

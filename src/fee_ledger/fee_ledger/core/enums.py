from __future__ import annotations

from enum import Enum


class PaymentPlan(str, Enum):
    """How the full fee is meant to be settled."""

    FULL = "full"
    INSTALLMENT = "installment"


class ScholarshipType(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


class PaymentMethod(str, Enum):
    """Payment channels staff can pick when entering a payment by hand."""

    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    MOBILE_MONEY = "mobile_money"
    CHEQUE = "cheque"
    OTHER = "other"


class FeeStatus(str, Enum):
    """Settlement status stored on each fee record.

    OVERDUE is part of the stored vocabulary but nothing in the ledger derives it.
    """

    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"

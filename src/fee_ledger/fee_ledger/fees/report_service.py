from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..core.enums import FeeStatus
from .model import FeeStatistics
from .repository import FeeRecordRepository


class FeeReportService:
    """Read-only aggregates over the fee records (point-in-time snapshot)."""

    def __init__(self, fees: FeeRecordRepository):
        self._fees = fees

    def statistics(self, cohort: Optional[str] = None) -> FeeStatistics:
        records = self._fees.list(cohort=cohort)

        expected = sum((r.amount_due for r in records), Decimal("0"))
        collected = sum((r.amount_paid for r in records), Decimal("0"))
        outstanding = sum((r.balance for r in records), Decimal("0"))

        counts = {status: 0 for status in FeeStatus}
        for r in records:
            counts[r.status] += 1

        return FeeStatistics(
            total_students=len(records),
            total_fees_expected=expected,
            total_collected=collected,
            total_outstanding=outstanding,
            collection_rate=collected / expected * 100 if expected > 0 else Decimal("0"),
            paid_count=counts[FeeStatus.PAID],
            partial_count=counts[FeeStatus.PARTIAL],
            unpaid_count=counts[FeeStatus.UNPAID],
            overdue_count=counts[FeeStatus.OVERDUE],
            scholarship_count=sum(1 for r in records if r.scholarship.has_scholarship),
            full_scholarship_count=sum(1 for r in records if r.scholarship.is_full),
        )

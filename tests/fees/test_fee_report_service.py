from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

from src.fee_ledger.fee_ledger.core.enums import FeeStatus, ScholarshipType
from src.fee_ledger.fee_ledger.fees.model import FeeStructure, NewPayment, ScholarshipInfo, StudentFeeRecord
from src.fee_ledger.fee_ledger.fees.report_service import FeeReportService
from src.fee_ledger.fee_ledger.fees.service import RawScholarship


class FakeFeesRepo:
    def __init__(self, records):
        self._records = records
        self.last_args = None

    def list(self, *, cohort=None, status=None):
        self.last_args = {"cohort": cohort, "status": status}
        return [r for r in self._records if cohort is None or r.cohort == cohort]


def make_record(student_id, *, due, paid, status, cohort="gen-1", scholarship=None):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    due, paid = Decimal(due), Decimal(paid)
    return StudentFeeRecord(
        student_id=student_id,
        student_name=student_id.upper(),
        cohort=cohort,
        email=f"{student_id}@example.org",
        fee_structure=FeeStructure(full_amount=Decimal("2000")),
        scholarship=scholarship or ScholarshipInfo(),
        total_fees=Decimal("2000"),
        amount_due=due,
        amount_paid=paid,
        balance=due - paid,
        status=status,
        enrollment_date=now,
        created_at=now,
        updated_at=now,
    )


def test_statistics_totals_and_rate():
    records = [
        make_record("a", due="1000", paid="1000", status=FeeStatus.PAID),
        make_record(
            "b",
            due="0",
            paid="0",
            status=FeeStatus.PAID,
            scholarship=ScholarshipInfo(has_scholarship=True, type=ScholarshipType.FULL),
        ),
        make_record("c", due="2000", paid="500", status=FeeStatus.PARTIAL),
    ]

    stats = FeeReportService(FakeFeesRepo(records)).statistics()

    assert stats.total_students == 3
    assert stats.total_fees_expected == Decimal("3000")
    assert stats.total_collected == Decimal("1500")
    assert stats.total_outstanding == Decimal("1500")
    assert stats.collection_rate == 50
    assert stats.paid_count == 2
    assert stats.partial_count == 1
    assert stats.unpaid_count == 0
    assert stats.overdue_count == 0
    assert stats.scholarship_count == 1
    assert stats.full_scholarship_count == 1


def test_statistics_rate_is_zero_when_nothing_is_expected():
    records = [
        make_record(
            "a",
            due="0",
            paid="0",
            status=FeeStatus.PAID,
            scholarship=ScholarshipInfo(has_scholarship=True, type=ScholarshipType.FULL),
        )
    ]

    stats = FeeReportService(FakeFeesRepo(records)).statistics()

    assert stats.collection_rate == 0
    assert stats.to_dict()["collectionRate"] == 0.0


def test_statistics_on_empty_store():
    stats = FeeReportService(FakeFeesRepo([])).statistics()

    assert stats.total_students == 0
    assert stats.collection_rate == 0


def test_statistics_counts_stored_overdue_records():
    record = replace(make_record("a", due="100", paid="0", status=FeeStatus.UNPAID), status=FeeStatus.OVERDUE)

    stats = FeeReportService(FakeFeesRepo([record])).statistics()

    assert stats.overdue_count == 1
    assert stats.unpaid_count == 0


def test_statistics_forwards_cohort_filter():
    repo = FakeFeesRepo(
        [
            make_record("a", due="1000", paid="250", status=FeeStatus.PARTIAL, cohort="gen-1"),
            make_record("b", due="1000", paid="1000", status=FeeStatus.PAID, cohort="gen-2"),
        ]
    )

    stats = FeeReportService(repo).statistics(cohort="gen-2")

    assert repo.last_args["cohort"] == "gen-2"
    assert stats.total_students == 1
    assert stats.collection_rate == 100


def test_statistics_over_service_written_records(enroll, fee_service, fees_repo):
    enroll("s1", full_amount="1000")
    enroll("s2", full_amount="8000", scholarship=RawScholarship(has_scholarship=True, type="full"))
    enroll("s3", full_amount="4000", scholarship=RawScholarship(has_scholarship=True, type="partial", percentage="50"))
    fee_service.record_payment("s1", _payment("1000"))
    fee_service.record_payment("s3", _payment("500"))

    stats = FeeReportService(fees_repo).statistics()

    assert stats.total_fees_expected == Decimal("3000")
    assert stats.total_collected == Decimal("1500")
    assert stats.collection_rate == 50
    assert (stats.paid_count, stats.partial_count, stats.unpaid_count) == (2, 1, 0)
    assert stats.to_dict()["totalFeesExpected"] == 3000.0


def _payment(amount):
    return NewPayment(amount=amount, method="cash", recorded_by="staff-1", recorded_by_name="Front Desk")

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.fee_ledger.fee_ledger.fees.memory_fee_repository import InMemoryFeeRepository
from src.fee_ledger.fee_ledger.fees.model import FeeStructure
from src.fee_ledger.fee_ledger.fees.service import FeeService, RawScholarship


@pytest.fixture
def fixed_now():
    return datetime(2026, 2, 1, 8, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def fees_repo():
    return InMemoryFeeRepository()


@pytest.fixture
def fee_service(fees_repo):
    return FeeService(fees_repo)


@pytest.fixture
def enroll(fee_service, fixed_now):
    """Initialize a fee record with sensible defaults."""

    def _enroll(
        student_id: str = "stu-1",
        *,
        full_amount="10000",
        scholarship: RawScholarship | None = None,
        student_name: str | None = None,
        cohort: str = "gen-1",
    ):
        return fee_service.initialize(
            student_id=student_id,
            student_name=student_name or f"Student {student_id}",
            cohort=cohort,
            email=f"{student_id}@example.org",
            fee_structure=FeeStructure.create(full_amount=full_amount, currency="USD"),
            scholarship=scholarship,
            now=fixed_now,
        )

    return _enroll


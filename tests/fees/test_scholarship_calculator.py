from decimal import Decimal

import pytest

from src.fee_ledger.fee_ledger.core.enums import FeeStatus, ScholarshipType
from src.fee_ledger.fee_ledger.core.exceptions import ValidationError
from src.fee_ledger.fee_ledger.fees.calculator import ScholarshipCalculator, derive_status
from src.fee_ledger.fee_ledger.fees.model import ScholarshipInfo


def test_normalize_without_scholarship_drops_other_fields():
    info = ScholarshipCalculator.normalize(False, "partial", "40", "Merit award")

    assert info == ScholarshipInfo(has_scholarship=False)


def test_normalize_partial_keeps_valid_percentage_and_trims_description():
    info = ScholarshipCalculator.normalize(True, "partial", "40", "  Merit award  ")

    assert info.type == ScholarshipType.PARTIAL
    assert info.percentage == Decimal("40")
    assert info.description == "Merit award"


@pytest.mark.parametrize("raw", ["0", "-5", "100.5", "abc", "", None, float("nan")])
def test_normalize_partial_drops_invalid_percentage(raw):
    info = ScholarshipCalculator.normalize(True, "partial", raw, "   ")

    assert info.has_scholarship is True
    assert info.percentage is None
    assert info.description is None


def test_normalize_full_ignores_percentage():
    info = ScholarshipCalculator.normalize(True, ScholarshipType.FULL, 30)

    assert info.type == ScholarshipType.FULL
    assert info.percentage is None


def test_normalize_strict_rejects_out_of_range_percentage():
    with pytest.raises(ValidationError):
        ScholarshipCalculator.normalize_strict(True, "partial", "120")


def test_normalize_strict_rejects_unknown_type():
    with pytest.raises(ValidationError):
        ScholarshipCalculator.normalize_strict(True, "half", "50")


def test_normalize_strict_ignores_terms_when_no_scholarship():
    assert ScholarshipCalculator.normalize_strict(False, "half", "500") == ScholarshipInfo(has_scholarship=False)


@pytest.mark.parametrize(
    "percentage, expected",
    [("50", "5000.00"), ("80", "2000.00"), ("100", "0.00"), ("12.5", "8750.00"), ("33.33", "6667.00")],
)
def test_amount_due_partial(percentage, expected):
    info = ScholarshipCalculator.normalize(True, "partial", percentage)

    assert ScholarshipCalculator.amount_due(Decimal("10000"), info) == Decimal(expected)


def test_amount_due_full_and_none():
    total = Decimal("8000")

    assert ScholarshipCalculator.amount_due(total, ScholarshipInfo()) == total
    assert ScholarshipCalculator.amount_due(total, ScholarshipCalculator.normalize(True, "full")) == 0


def test_amount_due_partial_without_percentage_is_not_discounted():
    info = ScholarshipCalculator.normalize(True, "partial", "not-a-number")

    assert ScholarshipCalculator.amount_due(Decimal("8000"), info) == Decimal("8000")


@pytest.mark.parametrize(
    "due, paid, expected",
    [
        ("5000", "0", FeeStatus.UNPAID),
        ("5000", "2000", FeeStatus.PARTIAL),
        ("5000", "5000", FeeStatus.PAID),
        ("5000", "6000", FeeStatus.PAID),
        ("0", "0", FeeStatus.PAID),
    ],
)
def test_derive_status(due, paid, expected):
    assert derive_status(Decimal(due), Decimal(paid)) == expected


def test_derive_status_never_reports_overdue():
    samples = [Decimal(v) for v in ("0", "1", "250.50", "5000", "10000")]

    assert all(derive_status(d, p) != FeeStatus.OVERDUE for d in samples for p in samples)


def test_is_full_needs_an_active_full_scholarship():
    assert ScholarshipCalculator.normalize(True, "full").is_full
    assert not ScholarshipCalculator.normalize(True, "partial", "50").is_full
    assert not ScholarshipCalculator.normalize(False, "full").is_full

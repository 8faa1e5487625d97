from __future__ import annotations

import threading
import time
from decimal import Decimal

from src.fee_ledger.fee_ledger.core.enums import FeeStatus
from src.fee_ledger.fee_ledger.fees import service as service_module
from src.fee_ledger.fee_ledger.fees.model import NewPayment
from src.fee_ledger.fee_ledger.fees.service import RawScholarship


def _slow_derive_status(derive):
    # Widen the read-modify-write window so unsynchronized writers would overlap.
    def wrapper(amount_due, amount_paid):
        time.sleep(0.02)
        return derive(amount_due, amount_paid)

    return wrapper


def _run_concurrently(fns):
    start = threading.Barrier(len(fns))
    errors = []

    def runner(fn):
        start.wait()
        try:
            fn()
        except Exception as e:  # pragma: no cover - surfaced by the assertion below
            errors.append(e)

    threads = [threading.Thread(target=runner, args=(fn,)) for fn in fns]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)
    assert errors == []


def test_two_concurrent_payments_are_both_counted(enroll, fee_service, fees_repo, monkeypatch):
    monkeypatch.setattr(service_module, "derive_status", _slow_derive_status(service_module.derive_status))
    enroll(full_amount="5000")

    def pay(amount):
        return lambda: fee_service.record_payment(
            "stu-1",
            NewPayment(amount=amount, method="cash", recorded_by="staff-1", recorded_by_name="Front Desk"),
        )

    _run_concurrently([pay("500"), pay("700")])

    record = fees_repo.get("stu-1")
    assert record.amount_paid == Decimal("1200")
    assert record.balance == Decimal("3800")
    assert sorted(p.amount for p in record.payments) == [Decimal("500"), Decimal("700")]
    assert record.status == FeeStatus.PARTIAL


def test_payment_and_scholarship_change_race(enroll, fee_service, fees_repo, monkeypatch):
    monkeypatch.setattr(service_module, "derive_status", _slow_derive_status(service_module.derive_status))
    enroll(full_amount="10000")

    _run_concurrently(
        [
            lambda: fee_service.record_payment(
                "stu-1",
                NewPayment(amount="1000", method="cash", recorded_by="staff-1", recorded_by_name="Front Desk"),
            ),
            lambda: fee_service.update_scholarship(
                "stu-1",
                RawScholarship(has_scholarship=True, type="partial", percentage="50"),
                updated_by="admin-1",
            ),
        ]
    )

    record = fees_repo.get("stu-1")
    assert record.amount_due == Decimal("5000.00")
    assert record.amount_paid == Decimal("1000")
    assert record.balance == Decimal("4000")
    assert len(record.payments) == 1


def test_many_concurrent_payments_keep_ledger_consistent(enroll, fee_service, fees_repo):
    enroll(full_amount="100000")
    amounts = [Decimal(n) for n in range(1, 41)]

    _run_concurrently(
        [
            (lambda a=a: fee_service.record_payment(
                "stu-1",
                NewPayment(amount=a, method="mobile_money", recorded_by="staff-2", recorded_by_name="Cashier"),
            ))
            for a in amounts
        ]
    )

    record = fees_repo.get("stu-1")
    assert len(record.payments) == len(amounts)
    assert record.amount_paid == sum(amounts)
    assert record.version == 1 + len(amounts)

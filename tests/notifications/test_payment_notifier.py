from __future__ import annotations

import gc
import logging
from decimal import Decimal

from src.fee_ledger.fee_ledger.container import STORE_MEMORY, build_container
from src.fee_ledger.fee_ledger.fees.model import NewPayment
from src.fee_ledger.fee_ledger.fees.service import FeeService, RawScholarship
from src.fee_ledger.fee_ledger.fees.signals import payment_recorded
from src.fee_ledger.fee_ledger.notifications.memory_notification_repository import InMemoryNotificationRepository
from src.fee_ledger.fee_ledger.notifications.receivers import PaymentNotifier
from src.fee_ledger.fee_ledger.notifications.service import NotificationService


class FailingNotifications:
    def notify(self, user_id, **kwargs):
        raise ConnectionError("notification store unavailable")


def _cash(amount):
    return NewPayment(amount=amount, method="cash", recorded_by="staff-1", recorded_by_name="Front Desk")


def test_payment_sends_student_notification(enroll, fee_service):
    repo = InMemoryNotificationRepository()
    notifier = PaymentNotifier(NotificationService(repo)).connect(fee_service)
    enroll(full_amount="10000", scholarship=RawScholarship(has_scholarship=True, type="partial", percentage="50"))

    try:
        fee_service.record_payment("stu-1", _cash("2000"))
    finally:
        notifier.disconnect()

    [n] = repo.list_for_user("stu-1")
    assert n.title == "Payment Recorded"
    assert n.description == "A payment of USD 2000.00 has been recorded. Balance: USD 3000.00"
    assert n.href == "/fees"
    assert n.read is False


def test_scholarship_update_sends_no_notification(enroll, fee_service):
    repo = InMemoryNotificationRepository()
    notifier = PaymentNotifier(NotificationService(repo)).connect(fee_service)
    enroll()

    try:
        fee_service.update_scholarship("stu-1", RawScholarship(has_scholarship=True, type="full"), updated_by="admin-1")
    finally:
        notifier.disconnect()

    assert repo.list_for_user("stu-1") == []


def test_notification_failure_does_not_fail_payment(enroll, fee_service, fees_repo, caplog):
    notifier = PaymentNotifier(FailingNotifications()).connect(fee_service)
    enroll()

    try:
        with caplog.at_level(logging.ERROR):
            record, payment = fee_service.record_payment("stu-1", _cash("500"))
    finally:
        notifier.disconnect()

    assert record.amount_paid == Decimal("500")
    assert fees_repo.get("stu-1").payments == (payment,)
    assert "Failed to send payment notification" in caplog.text


def test_notifier_only_listens_to_its_service(enroll, fee_service, fees_repo):
    repo = InMemoryNotificationRepository()
    notifier = PaymentNotifier(NotificationService(repo)).connect(FeeService(fees_repo))
    enroll()

    try:
        fee_service.record_payment("stu-1", _cash("10"))
    finally:
        notifier.disconnect()

    assert repo.list_for_user("stu-1") == []


def test_dropped_container_leaves_no_payment_receiver():
    fee_service = build_container(store=STORE_MEMORY).fee_service
    gc.collect()

    assert list(payment_recorded.receivers_for(fee_service)) == []


def test_live_container_keeps_its_payment_receiver():
    container = build_container(store=STORE_MEMORY)
    gc.collect()

    try:
        assert len(list(payment_recorded.receivers_for(container.fee_service))) == 1
    finally:
        container.payment_notifier.disconnect()

"""Signal receivers that turn ledger events into student notifications."""

from __future__ import annotations

import logging
from decimal import Decimal

from ..core.constants import FEES_HREF
from ..fees.model import PaymentRecord, StudentFeeRecord
from ..fees.signals import payment_recorded
from .service import NotificationService

logger = logging.getLogger(__name__)


def _amount(currency: str, value: Decimal) -> str:
    return f"{currency} {value:.2f}"


def payment_message(record: StudentFeeRecord, payment: PaymentRecord) -> dict:
    currency = record.fee_structure.currency
    return {
        "title": "Payment Recorded",
        "description": (
            f"A payment of {_amount(currency, payment.amount)} has been recorded. "
            f"Balance: {_amount(currency, record.balance)}"
        ),
        "href": FEES_HREF,
    }


class PaymentNotifier:
    """Notifies the student after each recorded payment.

    Delivery is best effort: failures are logged and never reach the payment caller.
    """

    def __init__(self, notifications: NotificationService):
        self._notifications = notifications

    def connect(self, sender) -> "PaymentNotifier":
        """Listen to payments recorded by ``sender`` (a FeeService).

        The signal holds the notifier weakly: keep the returned notifier (the
        Container does) for as long as notifications should go out.
        """
        payment_recorded.connect(self._on_payment_recorded, sender=sender)
        return self

    def disconnect(self) -> None:
        payment_recorded.disconnect(self._on_payment_recorded)

    def _on_payment_recorded(self, sender, *, record: StudentFeeRecord, payment: PaymentRecord, **kwargs) -> None:
        try:
            self._notifications.notify(record.student_id, **payment_message(record, payment))
        except Exception:
            logger.exception("Failed to send payment notification to %s (payment %s)", record.student_id, payment.id)

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Sequence, Union

from ..core.enums import FeeStatus
from ..core.exceptions import ValidationError
from .model import StudentFeeRecord
from .repository import FeeRecordRepository
from .signals import fee_records_changed

logger = logging.getLogger(__name__)

Listener = Callable[[Sequence[StudentFeeRecord]], None]


class FeeQueryService:
    """Dashboard read paths: point read, filtered listing and live listing."""

    def __init__(self, fees: FeeRecordRepository):
        self._fees = fees

    def get_record(self, student_id: str) -> Optional[StudentFeeRecord]:
        return self._fees.get(student_id)

    def list_records(
        self,
        *,
        cohort: Optional[str] = None,
        status: Union[FeeStatus, str, None] = None,
    ) -> Sequence[StudentFeeRecord]:
        if status is not None:
            try:
                status = FeeStatus(status)
            except ValueError:
                raise ValidationError(f"Unknown fee status: {status!r}")
        return self._fees.list(cohort=cohort, status=status)

    def subscribe(self, callback: Listener, *, cohort: Optional[str] = None) -> Callable[[], None]:
        """Deliver the cohort listing now and again after every fee record write.

        Returns a function that stops the deliveries. A callback may write to the
        ledger itself; the listing for that write is delivered after it returns.
        """

        lock = threading.RLock()
        state = {"delivering": False, "pending": False}

        def deliver() -> None:
            # One delivery at a time per subscriber, each with a fresh listing.
            with lock:
                if state["delivering"]:
                    state["pending"] = True
                    return
                state["delivering"] = True
                try:
                    while True:
                        state["pending"] = False
                        records = self._fees.list(cohort=cohort)
                        try:
                            callback(records)
                        except Exception:
                            logger.exception("Fee records listener failed (cohort=%s)", cohort)
                        if not state["pending"]:
                            break
                finally:
                    state["delivering"] = False

        def on_change(sender, **kwargs) -> None:
            deliver()

        fee_records_changed.connect(on_change, sender=self._fees, weak=False)
        deliver()

        def unsubscribe() -> None:
            fee_records_changed.disconnect(on_change, sender=self._fees)

        return unsubscribe

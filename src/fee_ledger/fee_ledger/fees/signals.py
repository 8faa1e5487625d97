"""Domain signals sent by the fee ledger.

payment_recorded
    sender: the FeeService; kwargs: ``record`` (StudentFeeRecord after the write)
    and ``payment`` (the appended PaymentRecord). Sent after the write committed.

fee_records_changed
    sender: the repository that wrote; kwargs: ``student_id``.
"""

from blinker import Namespace

_signals = Namespace()

payment_recorded = _signals.signal("payment-recorded")
fee_records_changed = _signals.signal("fee-records-changed")

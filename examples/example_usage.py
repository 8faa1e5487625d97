"""Example: drive the ledger services directly (no Flask).

Runs against the in-memory store, so nothing needs to be configured.
"""

from src.fee_ledger.fee_ledger.container import STORE_MEMORY, build_container
from src.fee_ledger.fee_ledger.fees.model import FeeStructure, NewPayment
from src.fee_ledger.fee_ledger.fees.service import RawScholarship


def main():
    container = build_container(store=STORE_MEMORY)
    fees = container.fee_service

    fees.initialize(
        student_id="stu-001",
        student_name="Ama Mensah",
        cohort="gen-5",
        email="ama@example.org",
        fee_structure=FeeStructure.create(full_amount="10000", currency="GHS"),
        scholarship=RawScholarship(has_scholarship=True, type="partial", percentage="50"),
    )
    record, payment = fees.record_payment(
        "stu-001",
        NewPayment(amount="2000", method="mobile_money", recorded_by="staff-1", recorded_by_name="Front Desk"),
    )
    print(payment.id, record.amount_paid, record.balance, record.status.value)
    print(container.fee_report_service.statistics().to_dict())
    for n in container.notification_service.list_for_user("stu-001"):
        print(n.title, "-", n.description)


if __name__ == "__main__":
    main()

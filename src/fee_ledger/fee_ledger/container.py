from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .fees.memory_fee_repository import InMemoryFeeRepository
from .fees.mysql_fee_repository import MySQLFeeRepository
from .fees.query_service import FeeQueryService
from .fees.report_service import FeeReportService
from .fees.repository import FeeRecordRepository
from .fees.service import FeeService
from .notifications.memory_notification_repository import InMemoryNotificationRepository
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.receivers import PaymentNotifier
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService

STORE_MYSQL = "mysql"
STORE_MEMORY = "memory"


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    fees_repo: FeeRecordRepository
    notifications_repo: NotificationRepository

    fee_service: FeeService
    fee_report_service: FeeReportService
    fee_query_service: FeeQueryService
    notification_service: NotificationService
    payment_notifier: PaymentNotifier


def build_container(*, store: str = STORE_MYSQL, db_config: Optional[dict] = None) -> Container:
    conn = None
    if store == STORE_MYSQL:
        if not db_config:
            raise ValueError("db_config is required for the mysql store")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        fees_repo = MySQLFeeRepository(conn)
        notifications_repo = MySQLNotificationRepository(conn)
    elif store == STORE_MEMORY:
        fees_repo = InMemoryFeeRepository()
        notifications_repo = InMemoryNotificationRepository()
    else:
        raise ValueError(f"Unknown fee store: {store!r}")

    notification_service = NotificationService(notifications_repo)
    fee_service = FeeService(fees_repo)

    return Container(
        conn=conn,
        fees_repo=fees_repo,
        notifications_repo=notifications_repo,
        fee_service=fee_service,
        fee_report_service=FeeReportService(fees_repo),
        fee_query_service=FeeQueryService(fees_repo),
        notification_service=notification_service,
        payment_notifier=PaymentNotifier(notification_service).connect(fee_service),
    )

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import NOTIFICATIONS_TABLE
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_mysql_datetime
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: str,
        title: str,
        description: str,
        href: Optional[str],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO {NOTIFICATIONS_TABLE}(user_id, title, description, href, is_read, created_at)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (user_id, title, description, href, to_mysql_datetime(created_at)),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT notification_id, user_id, title, description, href, is_read, created_at
                FROM {NOTIFICATIONS_TABLE}
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, int(limit)),
            )
            rows = fetchall(cur)
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=r["user_id"],
                    title=r["title"],
                    description=r["description"],
                    href=r.get("href"),
                    read=bool(r["is_read"]),
                    created_at=r["created_at"],
                )
                for r in rows
            ]

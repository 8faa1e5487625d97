from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional, Sequence

from .model import Notification
from .repository import NotificationRepository


class InMemoryNotificationRepository(NotificationRepository):
    def __init__(self):
        self._items: list[Notification] = []
        self._lock = threading.Lock()

    def create(
        self,
        *,
        user_id: str,
        title: str,
        description: str,
        href: Optional[str],
        created_at: datetime,
    ) -> int:
        with self._lock:
            notification_id = len(self._items) + 1
            self._items.append(
                Notification(
                    notification_id=notification_id,
                    user_id=user_id,
                    title=title,
                    description=description,
                    href=href,
                    created_at=created_at,
                )
            )
            return notification_id

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[Notification]:
        with self._lock:
            items = [n for n in self._items if n.user_id == user_id]
        items.sort(key=lambda n: n.created_at, reverse=True)
        return items[:limit]

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Use case: deliver an in-app notification to one user."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(
        self,
        user_id: str,
        *,
        title: str,
        description: str,
        href: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        notification_id = self._notifications.create(
            user_id=require_non_empty(user_id, "User"),
            title=require_non_empty(title, "Title"),
            description=description,
            href=href,
            created_at=now or now_utc(),
        )
        logger.debug("Notification %s queued for %s", notification_id, user_id)
        return notification_id

    def list_for_user(self, user_id: str, *, limit: int = 50):
        return self._notifications.list_for_user(user_id, limit=limit)

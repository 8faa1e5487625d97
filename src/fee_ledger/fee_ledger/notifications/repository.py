from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        title: str,
        description: str,
        href: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, limit: int = 50) -> Sequence[Notification]:
        raise NotImplementedError

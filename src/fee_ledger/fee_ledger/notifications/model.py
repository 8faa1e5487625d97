from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: str
    title: str
    description: str
    created_at: datetime
    href: Optional[str] = None
    read: bool = False

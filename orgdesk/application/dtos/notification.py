"""DTOs for in-app notifications (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NotificationResult:
    id: str
    user_id: str
    organization_id: str | None
    type: str
    title: str
    message: str
    link: str | None
    is_read: bool
    created_at: datetime
    updated_at: datetime

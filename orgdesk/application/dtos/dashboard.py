"""DTOs for the organization dashboard (aggregate cache)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DashboardSummary:
    """Daily counters for one organization, computed from several tables."""

    organization_id: str
    total_staff: int
    staff_on_duty: int
    tasks_due_today: int
    tasks_completed_today: int
    pending_reports: int
    pending_leave_requests: int
    generated_at: datetime

"""DTOs for attendance and leave (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import date, datetime

from orgdesk.domain.enums import AttendanceStatus, LeaveStatus


@dataclass(frozen=True)
class AttendanceResult:
    """One check-in (and optional check-out) of a staff member."""

    id: str
    organization_id: str
    staff_id: str
    check_in: datetime
    check_out: datetime | None
    status: AttendanceStatus
    notes: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class LeaveRequestResult:
    id: str
    organization_id: str
    staff_id: str
    leave_type: str
    start_date: date
    end_date: date
    reason: str | None
    status: LeaveStatus
    reviewed_by: str | None
    reviewed_at: datetime | None
    review_note: str | None
    created_at: datetime
    updated_at: datetime

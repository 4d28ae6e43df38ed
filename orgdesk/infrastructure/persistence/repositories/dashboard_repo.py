"""Dashboard summary: one cached aggregate per organization and day.

The summary counts rows of several tables. Staff, attendance, task, report
and leave request policies list the current day's dashboard key among their
aggregate keys, so any write to those entities drops the cached summary.
The key carries the UTC date: after midnight a fresh summary is computed.
"""

from datetime import datetime
from typing import cast

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import DashboardSummary
from orgdesk.domain.enums import LeaveStatus, ReportStatus, TaskStatus
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies, get_cache_policies
from orgdesk.infrastructure.cache.read_through import ReadThroughCache
from orgdesk.infrastructure.persistence.transaction import has_uncommitted_writes
from orgdesk.infrastructure.persistence.models import (
    Attendance,
    LeaveRequest,
    Report,
    Staff,
    Task,
)
from orgdesk.shared.utils.datetime import day_bounds_utc, utc_now


class DashboardRepository:
    """Read-only aggregate repository for the organization dashboard."""

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        self.db = db
        self.policies = policies or get_cache_policies()
        self.cache = ReadThroughCache(
            cache_service, bypass=lambda: has_uncommitted_writes(db)
        )

    async def get_summary(self, organization_id: str) -> DashboardSummary:
        """Return today's counters for organization (cached for ttl_dashboard)."""
        now = utc_now()
        summary = await self.cache.get_or_load(
            keys.dashboard_key(organization_id, now.date()),
            lambda: self._compute(organization_id, now),
            ttl=self.policies.ttl_dashboard,
            value_type=DashboardSummary,
        )
        # _compute never returns None
        return cast(DashboardSummary, summary)

    async def _count(self, stmt: Select[tuple[int]]) -> int:
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def _compute(self, organization_id: str, now: datetime) -> DashboardSummary:
        start, end = day_bounds_utc(now)
        total_staff = await self._count(
            select(func.count(Staff.id)).where(
                Staff.organization_id == organization_id, Staff.is_active.is_(True)
            )
        )
        on_duty = await self._count(
            select(func.count(func.distinct(Attendance.staff_id))).where(
                Attendance.organization_id == organization_id,
                Attendance.check_in >= start,
                Attendance.check_in < end,
                Attendance.check_out.is_(None),
            )
        )
        due_today = await self._count(
            select(func.count(Task.id)).where(
                Task.organization_id == organization_id,
                Task.due_date >= start,
                Task.due_date < end,
                Task.status != TaskStatus.DONE.value,
            )
        )
        completed_today = await self._count(
            select(func.count(Task.id)).where(
                Task.organization_id == organization_id,
                Task.completed_at >= start,
                Task.completed_at < end,
            )
        )
        pending_reports = await self._count(
            select(func.count(Report.id)).where(
                Report.organization_id == organization_id,
                Report.status == ReportStatus.SUBMITTED.value,
            )
        )
        pending_leave = await self._count(
            select(func.count(LeaveRequest.id)).where(
                LeaveRequest.organization_id == organization_id,
                LeaveRequest.status == LeaveStatus.PENDING.value,
            )
        )
        return DashboardSummary(
            organization_id=organization_id,
            total_staff=total_staff,
            staff_on_duty=on_duty,
            tasks_due_today=due_today,
            tasks_completed_today=completed_today,
            pending_reports=pending_reports,
            pending_leave_requests=pending_leave,
            generated_at=now,
        )

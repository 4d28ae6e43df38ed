"""Attendance repository.

Cached views: attendance:{id}, the organization's attendance for the
UTC day (keyed by date) and the last RECENT_ATTENDANCE_LIMIT rows per staff member.
Arbitrary date ranges are read straight from the store.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import AttendanceResult
from orgdesk.core.constants import RECENT_ATTENDANCE_LIMIT
from orgdesk.domain.enums import AttendanceStatus
from orgdesk.domain.exceptions import InvalidStateTransitionException, ValidationException
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models.attendance import Attendance
from orgdesk.infrastructure.persistence.repositories.cached_repo import CachedRepository
from orgdesk.shared.utils.datetime import day_bounds_utc, ensure_utc, utc_now


class AttendanceRepository(CachedRepository[Attendance, AttendanceResult]):
    """Attendance repository. check_in/check_out drop today, recent and dashboard keys."""

    policy_name = "attendance"
    updatable_fields = frozenset({"check_in", "check_out", "status", "notes"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Attendance, cache_service, policies=policies)

    async def get_today(
        self, organization_id: str, now: datetime | None = None
    ) -> list[AttendanceResult]:
        """Attendance rows of the organization checked in during the UTC day of now."""
        start, end = day_bounds_utc(now)
        rows = await self.cache.get_or_load(
            keys.attendance_day_key(organization_id, start.date()),
            lambda: self._list(
                select(Attendance)
                .where(
                    Attendance.organization_id == organization_id,
                    Attendance.check_in >= start,
                    Attendance.check_in < end,
                )
                .order_by(Attendance.check_in.desc())
            ),
            ttl=self.policies.ttl_today_attendance,
            value_type=list[AttendanceResult],
        )
        return rows if rows is not None else []

    async def get_recent_for_staff(self, staff_id: str) -> list[AttendanceResult]:
        """Most recent check-ins of a staff member, newest first."""
        rows = await self.cache.get_or_load(
            keys.attendance_recent_key(staff_id),
            lambda: self._list(
                select(Attendance)
                .where(Attendance.staff_id == staff_id)
                .order_by(Attendance.check_in.desc())
                .limit(RECENT_ATTENDANCE_LIMIT)
            ),
            ttl=self.policies.ttl_recent_attendance,
            value_type=list[AttendanceResult],
        )
        return rows if rows is not None else []

    async def list_for_staff(
        self, staff_id: str, start: datetime, end: datetime
    ) -> list[AttendanceResult]:
        """Rows with check_in in [start, end). Not cached: ranges are unbounded."""
        if end <= start:
            raise ValidationException("end must be after start", field="end")
        return await self._list(
            select(Attendance)
            .where(
                Attendance.staff_id == staff_id,
                Attendance.check_in >= start,
                Attendance.check_in < end,
            )
            .order_by(Attendance.check_in)
        )

    async def check_in(
        self,
        organization_id: str,
        staff_id: str,
        *,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        notes: str | None = None,
        at: datetime | None = None,
    ) -> AttendanceResult:
        attendance = Attendance(
            organization_id=organization_id,
            staff_id=staff_id,
            check_in=ensure_utc(at) or utc_now(),
            status=status.value,
            notes=notes,
        )
        return await self._create(attendance)

    async def check_out(
        self, attendance_id: str, at: datetime | None = None
    ) -> AttendanceResult:
        """Close an open attendance row.

        Raises:
            ResourceNotFoundException: Unknown attendance id.
            InvalidStateTransitionException: Already checked out.
        """
        attendance = await self.require_entity(attendance_id)
        if attendance.check_out is not None:
            raise InvalidStateTransitionException(
                "attendance", attendance_id, "CHECKED_OUT", "check out"
            )
        attendance.check_out = ensure_utc(at) or utc_now()
        return await self._save(attendance)

    async def update_attendance(self, attendance_id: str, **changes: Any) -> AttendanceResult:
        return await self.update_fields(attendance_id, changes)

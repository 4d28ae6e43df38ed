"""Staff repository with read-through cache by id, email and employee id."""

from datetime import date
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import StaffResult
from orgdesk.domain.exceptions import ResourceAlreadyExistsException
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import Attendance, LeaveRequest, Staff
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
    require_key_safe,
)
from orgdesk.infrastructure.persistence.repositories.user_repo import normalize_email


class StaffRepository(CachedRepository[Staff, StaffResult]):
    """Staff repository.

    Keys: staff:{id}, staff:org:{org}:email:{email},
    staff:org:{org}:employee:{employee_id}. Every write also drops the
    organization dashboard summary (active staff count).
    """

    policy_name = "staff"
    updatable_fields = frozenset(
        {
            "user_id",
            "department_id",
            "employee_id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "position",
            "employment_type",
            "hire_date",
            "is_active",
        }
    )

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Staff, cache_service, policies=policies)

    async def get_by_email(self, organization_id: str, email: str) -> StaffResult | None:
        normalized = normalize_email(email)
        return await self._get_cached_by(
            keys.staff_email_key(organization_id, normalized),
            Staff.organization_id == organization_id,
            Staff.email == normalized,
        )

    async def get_by_employee_id(
        self, organization_id: str, employee_id: str
    ) -> StaffResult | None:
        return await self._get_cached_by(
            keys.staff_employee_key(
                organization_id, require_key_safe("employee_id", employee_id)
            ),
            Staff.organization_id == organization_id,
            Staff.employee_id == employee_id,
        )

    async def list_by_organization(
        self,
        organization_id: str,
        *,
        department_id: str | None = None,
        active_only: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> list[StaffResult]:
        stmt = select(Staff).where(Staff.organization_id == organization_id)
        if department_id is not None:
            stmt = stmt.where(Staff.department_id == department_id)
        if active_only:
            stmt = stmt.where(Staff.is_active.is_(True))
        return await self._list(
            stmt.order_by(Staff.last_name, Staff.first_name).offset(skip).limit(limit)
        )

    async def _ensure_unique(
        self,
        organization_id: str,
        email: str | None,
        employee_id: str | None,
        exclude_id: str | None = None,
    ) -> None:
        """Raise ResourceAlreadyExistsException naming the clashing field."""
        clauses = []
        if email is not None:
            clauses.append(Staff.email == email)
        if employee_id is not None:
            clauses.append(Staff.employee_id == employee_id)
        if not clauses:
            return
        stmt = select(Staff).where(Staff.organization_id == organization_id, or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(Staff.id != exclude_id)
        result = await self.db.execute(stmt.limit(1))
        existing = result.scalar_one_or_none()
        if existing is None:
            return
        if email is not None and existing.email == email:
            raise ResourceAlreadyExistsException("staff", "email", email)
        raise ResourceAlreadyExistsException("staff", "employee_id", str(employee_id))

    async def create_staff(
        self,
        organization_id: str,
        employee_id: str,
        first_name: str,
        last_name: str,
        email: str,
        *,
        user_id: str | None = None,
        department_id: str | None = None,
        phone: str | None = None,
        position: str | None = None,
        employment_type: str = "FULL_TIME",
        hire_date: date | None = None,
    ) -> StaffResult:
        """Create staff member. Email and employee id are unique per organization."""
        normalized = normalize_email(email)
        require_key_safe("employee_id", employee_id)
        await self._ensure_unique(organization_id, normalized, employee_id)
        staff = Staff(
            organization_id=organization_id,
            employee_id=employee_id,
            first_name=first_name,
            last_name=last_name,
            email=normalized,
            user_id=user_id,
            department_id=department_id,
            phone=phone,
            position=position,
            employment_type=employment_type,
            hire_date=hire_date,
            is_active=True,
        )
        return await self._create(staff, conflict=("email", normalized))

    async def update_staff(self, staff_id: str, **changes: Any) -> StaffResult:
        """Update staff; old email/employee id keys are dropped along with the new ones."""
        staff = await self.require_entity(staff_id)
        if "email" in changes:
            changes["email"] = normalize_email(changes["email"])
        if "employee_id" in changes:
            require_key_safe("employee_id", changes["employee_id"])
        await self._ensure_unique(
            staff.organization_id,
            changes.get("email"),
            changes.get("employee_id"),
            exclude_id=staff_id,
        )
        self._apply_changes(staff, changes)
        return await self._save(staff)

    def _dependents(self, entity_id: str) -> list[Dependent]:
        return [
            (Attendance, "attendance", Attendance.staff_id == entity_id),
            (LeaveRequest, "leave_request", LeaveRequest.staff_id == entity_id),
        ]

    async def delete_staff(self, staff_id: str) -> None:
        """Delete staff member; attendance and leave requests cascade."""
        await self.delete_by_id(staff_id)

"""Leave request repository with approve/reject transitions."""

from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import LeaveRequestResult
from orgdesk.domain.enums import LeaveStatus
from orgdesk.domain.exceptions import InvalidStateTransitionException, ValidationException
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models.leave_request import LeaveRequest
from orgdesk.infrastructure.persistence.repositories.cached_repo import CachedRepository
from orgdesk.shared.utils.datetime import utc_now


class LeaveRequestRepository(CachedRepository[LeaveRequest, LeaveRequestResult]):
    """Leave request repository. Keys: leave:{id}; writes drop the dashboard summary."""

    policy_name = "leave_request"
    updatable_fields = frozenset({"leave_type", "start_date", "end_date", "reason"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, LeaveRequest, cache_service, policies=policies)

    async def list_for_staff(self, staff_id: str) -> list[LeaveRequestResult]:
        return await self._list(
            select(LeaveRequest)
            .where(LeaveRequest.staff_id == staff_id)
            .order_by(LeaveRequest.start_date.desc())
        )

    async def list_for_organization(
        self,
        organization_id: str,
        *,
        status: LeaveStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[LeaveRequestResult]:
        stmt = select(LeaveRequest).where(LeaveRequest.organization_id == organization_id)
        if status is not None:
            stmt = stmt.where(LeaveRequest.status == status.value)
        return await self._list(
            stmt.order_by(LeaveRequest.created_at.desc()).offset(skip).limit(limit)
        )

    async def create_leave_request(
        self,
        organization_id: str,
        staff_id: str,
        leave_type: str,
        start_date: date,
        end_date: date,
        *,
        reason: str | None = None,
    ) -> LeaveRequestResult:
        if end_date < start_date:
            raise ValidationException("end_date must not be before start_date", field="end_date")
        leave_request = LeaveRequest(
            organization_id=organization_id,
            staff_id=staff_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=LeaveStatus.PENDING.value,
        )
        return await self._create(leave_request)

    async def update_leave_request(
        self, leave_request_id: str, **changes: Any
    ) -> LeaveRequestResult:
        leave_request = await self.require_entity(leave_request_id)
        self._apply_changes(leave_request, changes)
        if leave_request.end_date < leave_request.start_date:
            raise ValidationException("end_date must not be before start_date", field="end_date")
        return await self._save(leave_request)

    async def _review(
        self,
        leave_request_id: str,
        status: LeaveStatus,
        reviewer_id: str,
        note: str | None,
    ) -> LeaveRequestResult:
        leave_request = await self.require_entity(leave_request_id)
        if leave_request.status != LeaveStatus.PENDING.value:
            raise InvalidStateTransitionException(
                "leave_request",
                leave_request_id,
                leave_request.status,
                "approve" if status is LeaveStatus.APPROVED else "reject",
            )
        leave_request.status = status.value
        leave_request.reviewed_by = reviewer_id
        leave_request.reviewed_at = utc_now()
        leave_request.review_note = note
        return await self._save(leave_request)

    async def approve(
        self, leave_request_id: str, reviewer_id: str, note: str | None = None
    ) -> LeaveRequestResult:
        """Approve a PENDING request; any other state raises InvalidStateTransitionException."""
        return await self._review(leave_request_id, LeaveStatus.APPROVED, reviewer_id, note)

    async def reject(
        self, leave_request_id: str, reviewer_id: str, note: str | None = None
    ) -> LeaveRequestResult:
        """Reject a PENDING request; any other state raises InvalidStateTransitionException."""
        return await self._review(leave_request_id, LeaveStatus.REJECTED, reviewer_id, note)

    async def delete_leave_request(self, leave_request_id: str) -> None:
        await self.delete_by_id(leave_request_id)

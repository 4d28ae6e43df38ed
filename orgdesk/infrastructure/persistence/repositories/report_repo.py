"""Report repository: drafts, submission and review."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import ReportResult
from orgdesk.domain.enums import ReportStatus
from orgdesk.domain.exceptions import (
    InvalidStateTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models.report import Report
from orgdesk.infrastructure.persistence.repositories.cached_repo import CachedRepository
from orgdesk.shared.utils.datetime import utc_now


class ReportRepository(CachedRepository[Report, ReportResult]):
    """Report repository. Keys: report:{id}; writes drop the dashboard (pending reports)."""

    policy_name = "report"
    updatable_fields = frozenset({"title", "content", "template_id", "workspace_id"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Report, cache_service, policies=policies)

    def _filtered(
        self,
        organization_id: str,
        status: ReportStatus | None,
        author_id: str | None,
    ) -> list[Any]:
        conditions: list[Any] = [Report.organization_id == organization_id]
        if status is not None:
            conditions.append(Report.status == status.value)
        if author_id is not None:
            conditions.append(Report.author_id == author_id)
        return conditions

    async def list_reports(
        self,
        organization_id: str,
        *,
        status: ReportStatus | None = None,
        author_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ReportResult]:
        return await self._list(
            select(Report)
            .where(*self._filtered(organization_id, status, author_id))
            .order_by(Report.created_at.desc())
            .offset(skip)
            .limit(limit)
        )

    async def count_reports(
        self,
        organization_id: str,
        *,
        status: ReportStatus | None = None,
        author_id: str | None = None,
    ) -> int:
        result = await self.db.execute(
            select(func.count(Report.id)).where(
                *self._filtered(organization_id, status, author_id)
            )
        )
        return result.scalar() or 0

    async def create_report(
        self,
        organization_id: str,
        author_id: str,
        title: str,
        *,
        content: dict[str, Any] | None = None,
        workspace_id: str | None = None,
        template_id: str | None = None,
    ) -> ReportResult:
        report = Report(
            organization_id=organization_id,
            author_id=author_id,
            title=title,
            content=dict(content or {}),
            workspace_id=workspace_id,
            template_id=template_id,
            status=ReportStatus.DRAFT.value,
        )
        return await self._create(report)

    async def update_report(self, report_id: str, **changes: Any) -> ReportResult:
        if "content" in changes:
            changes["content"] = dict(changes["content"])
        return await self.update_fields(report_id, changes)

    async def _transition(
        self,
        report_id: str,
        expected: ReportStatus,
        target: ReportStatus,
        action: str,
    ) -> Report:
        report = await self.require_entity(report_id)
        if report.status != expected.value:
            raise InvalidStateTransitionException("report", report_id, report.status, action)
        report.status = target.value
        return report

    async def submit(self, report_id: str) -> ReportResult:
        """DRAFT -> SUBMITTED."""
        report = await self._transition(
            report_id, ReportStatus.DRAFT, ReportStatus.SUBMITTED, "submit"
        )
        report.submitted_at = utc_now()
        return await self._save(report)

    async def approve(
        self, report_id: str, reviewer_id: str, note: str | None = None
    ) -> ReportResult:
        """SUBMITTED -> APPROVED."""
        report = await self._transition(
            report_id, ReportStatus.SUBMITTED, ReportStatus.APPROVED, "approve"
        )
        report.reviewed_by = reviewer_id
        report.reviewed_at = utc_now()
        report.review_note = note
        return await self._save(report)

    async def reject(
        self, report_id: str, reviewer_id: str, note: str | None = None
    ) -> ReportResult:
        """SUBMITTED -> REJECTED."""
        report = await self._transition(
            report_id, ReportStatus.SUBMITTED, ReportStatus.REJECTED, "reject"
        )
        report.reviewed_by = reviewer_id
        report.reviewed_at = utc_now()
        report.review_note = note
        return await self._save(report)

    async def bulk_reject(
        self,
        organization_id: str,
        report_ids: Sequence[str],
        reviewer_id: str,
        note: str | None = None,
    ) -> int:
        """Reject every SUBMITTED report of organization among report_ids in one UPDATE.

        Reports in another status or organization are left alone. Returns the
        number of rejected reports.

        Raises:
            ValidationException: report_ids is empty.
            ResourceNotFoundException: None of the ids is a SUBMITTED report.
        """
        if not report_ids:
            raise ValidationException("report_ids must not be empty", field="report_ids")
        candidates = await self._list(
            select(Report).where(
                Report.organization_id == organization_id,
                Report.id.in_(report_ids),
                Report.status == ReportStatus.SUBMITTED.value,
            )
        )
        if not candidates:
            raise ResourceNotFoundException("report", ", ".join(report_ids))
        await self.db.execute(
            update(Report)
            .where(Report.id.in_([r.id for r in candidates]))
            .values(
                status=ReportStatus.REJECTED.value,
                reviewed_by=reviewer_id,
                reviewed_at=utc_now(),
                review_note=note,
            )
        )
        await self.db.flush()
        await self._invalidate_records(candidates)
        return len(candidates)

    async def delete_report(self, report_id: str) -> None:
        await self.delete_by_id(report_id)

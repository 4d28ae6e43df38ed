"""Report template repository."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import ReportTemplateResult
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import Report, ReportTemplate
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
)


class ReportTemplateRepository(CachedRepository[ReportTemplate, ReportTemplateResult]):
    """Template repository. Keys: template:{id}."""

    policy_name = "report_template"
    updatable_fields = frozenset({"name", "description", "fields", "is_active", "workspace_id"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, ReportTemplate, cache_service, policies=policies)

    async def list_templates(
        self, organization_id: str, *, active_only: bool = False
    ) -> list[ReportTemplateResult]:
        stmt = select(ReportTemplate).where(ReportTemplate.organization_id == organization_id)
        if active_only:
            stmt = stmt.where(ReportTemplate.is_active.is_(True))
        return await self._list(stmt.order_by(ReportTemplate.name))

    async def create_template(
        self,
        organization_id: str,
        name: str,
        fields: list[dict[str, Any]],
        *,
        description: str | None = None,
        workspace_id: str | None = None,
    ) -> ReportTemplateResult:
        template = ReportTemplate(
            organization_id=organization_id,
            name=name,
            fields=[dict(f) for f in fields],
            description=description,
            workspace_id=workspace_id,
            is_active=True,
        )
        return await self._create(template)

    async def update_template(self, template_id: str, **changes: Any) -> ReportTemplateResult:
        if "fields" in changes:
            changes["fields"] = [dict(f) for f in changes["fields"]]
        return await self.update_fields(template_id, changes)

    def _dependents(self, entity_id: str) -> list[Dependent]:
        # report.template_id is SET NULL
        return [(Report, "report", Report.template_id == entity_id)]

    async def delete_template(self, template_id: str) -> None:
        await self.delete_by_id(template_id)

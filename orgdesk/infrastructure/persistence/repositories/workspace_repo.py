"""Workspace repository with read-through cache by id and slug."""

from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import WorkspaceResult
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import (
    Document,
    Project,
    Report,
    ReportTemplate,
    Task,
    Workspace,
)
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
    require_key_safe,
)


class WorkspaceRepository(CachedRepository[Workspace, WorkspaceResult]):
    """Workspace repository. Keys: workspace:{id}, workspace:slug:{slug}."""

    policy_name = "workspace"
    updatable_fields = frozenset({"name", "slug", "description"})

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Workspace, cache_service, policies=policies)

    async def get_by_slug(self, slug: str) -> WorkspaceResult | None:
        return await self._get_cached_by(
            keys.workspace_slug_key(require_key_safe("slug", slug)),
            Workspace.slug == slug,
        )

    async def list_by_organization(
        self, organization_id: str, skip: int = 0, limit: int = 100
    ) -> list[WorkspaceResult]:
        return await self._list(
            select(Workspace)
            .where(Workspace.organization_id == organization_id)
            .order_by(Workspace.name)
            .offset(skip)
            .limit(limit)
        )

    async def create_workspace(
        self,
        organization_id: str,
        name: str,
        slug: str,
        *,
        description: str | None = None,
    ) -> WorkspaceResult:
        workspace = Workspace(
            organization_id=organization_id,
            name=name,
            slug=require_key_safe("slug", slug),
            description=description,
        )
        return await self._create(workspace, conflict=("slug", slug))

    async def update_workspace(self, workspace_id: str, **changes: Any) -> WorkspaceResult:
        if "slug" in changes:
            require_key_safe("slug", changes["slug"])
        return await self.update_fields(
            workspace_id, changes, conflict=("slug", str(changes.get("slug", "")))
        )

    def _dependents(self, entity_id: str) -> list[Dependent]:
        projects = select(Project.id).where(Project.workspace_id == entity_id)
        tasks = select(Task.id).where(Task.workspace_id == entity_id)
        templates = select(ReportTemplate.id).where(ReportTemplate.workspace_id == entity_id)
        return [
            (Project, "project", Project.workspace_id == entity_id),
            # deleted with the workspace, or detached from a deleted project
            (Task, "task", or_(Task.workspace_id == entity_id, Task.project_id.in_(projects))),
            (ReportTemplate, "report_template", ReportTemplate.workspace_id == entity_id),
            (
                Report,
                "report",
                or_(Report.workspace_id == entity_id, Report.template_id.in_(templates)),
            ),
            (Document, "document", Document.task_id.in_(tasks)),
        ]

    async def delete_workspace(self, workspace_id: str) -> None:
        """Delete workspace together with the rows that cascade from it."""
        await self.delete_by_id(workspace_id)

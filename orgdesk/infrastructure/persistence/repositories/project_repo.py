"""Project repository with read-through cache by id and (workspace, slug)."""

from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import ProjectResult
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import Project, Task
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
    require_key_safe,
)


class ProjectRepository(CachedRepository[Project, ProjectResult]):
    """Project repository. Keys: project:{id}, project:ws:{workspace}:slug:{slug}."""

    policy_name = "project"
    updatable_fields = frozenset(
        {"name", "slug", "description", "status", "start_date", "end_date"}
    )

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Project, cache_service, policies=policies)

    async def get_by_slug(self, workspace_id: str, slug: str) -> ProjectResult | None:
        return await self._get_cached_by(
            keys.project_slug_key(workspace_id, require_key_safe("slug", slug)),
            Project.workspace_id == workspace_id,
            Project.slug == slug,
        )

    async def list_projects(
        self,
        organization_id: str,
        *,
        workspace_id: str | None = None,
        status: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[ProjectResult]:
        stmt = select(Project).where(Project.organization_id == organization_id)
        if workspace_id is not None:
            stmt = stmt.where(Project.workspace_id == workspace_id)
        if status is not None:
            stmt = stmt.where(Project.status == status)
        return await self._list(stmt.order_by(Project.name).offset(skip).limit(limit))

    async def create_project(
        self,
        organization_id: str,
        workspace_id: str,
        name: str,
        slug: str,
        *,
        description: str | None = None,
        status: str = "ACTIVE",
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> ProjectResult:
        """Create project. Slug is unique within the workspace."""
        project = Project(
            organization_id=organization_id,
            workspace_id=workspace_id,
            name=name,
            slug=require_key_safe("slug", slug),
            description=description,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
        return await self._create(project, conflict=("slug", slug))

    async def update_project(self, project_id: str, **changes: Any) -> ProjectResult:
        if "slug" in changes:
            require_key_safe("slug", changes["slug"])
        return await self.update_fields(
            project_id, changes, conflict=("slug", str(changes.get("slug", "")))
        )

    def _dependents(self, entity_id: str) -> list[Dependent]:
        # task.project_id is SET NULL
        return [(Task, "task", Task.project_id == entity_id)]

    async def delete_project(self, project_id: str) -> None:
        await self.delete_by_id(project_id)

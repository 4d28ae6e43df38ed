"""Task repository with a cached per-project status summary."""

from datetime import datetime
from typing import Any, cast

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdesk.application.dtos import ProjectTaskSummary, TaskResult
from orgdesk.domain.enums import TaskStatus
from orgdesk.infrastructure.cache import keys
from orgdesk.infrastructure.cache.cache_protocol import CacheProtocol
from orgdesk.infrastructure.cache.policy import CachePolicies
from orgdesk.infrastructure.persistence.models import Document, Task
from orgdesk.infrastructure.persistence.repositories.cached_repo import (
    CachedRepository,
    Dependent,
)
from orgdesk.shared.utils.datetime import utc_now


class TaskRepository(CachedRepository[Task, TaskResult]):
    """Task repository.

    Keys: task:{id}. Writes drop the organization dashboard and, for tasks
    in a project, that project's task summary (old and new project on a move).
    """

    policy_name = "task"
    updatable_fields = frozenset(
        {
            "workspace_id",
            "project_id",
            "title",
            "description",
            "status",
            "priority",
            "due_date",
            "assigned_by",
        }
    )

    def __init__(
        self,
        db: AsyncSession,
        cache_service: CacheProtocol | None = None,
        *,
        policies: CachePolicies | None = None,
    ) -> None:
        super().__init__(db, Task, cache_service, policies=policies)

    async def list_tasks(
        self,
        organization_id: str,
        *,
        project_id: str | None = None,
        status: TaskStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[TaskResult]:
        stmt = select(Task).where(Task.organization_id == organization_id)
        if project_id is not None:
            stmt = stmt.where(Task.project_id == project_id)
        if status is not None:
            stmt = stmt.where(Task.status == status.value)
        return await self._list(
            stmt.order_by(Task.created_at.desc()).offset(skip).limit(limit)
        )

    async def get_project_summary(self, project_id: str) -> ProjectTaskSummary:
        """Task counts by status for a project (cached; zero counts for unknown projects)."""
        summary = await self.cache.get_or_load(
            keys.project_task_summary_key(project_id),
            lambda: self._load_project_summary(project_id),
            ttl=self.policies.ttl_task_summary,
            value_type=ProjectTaskSummary,
        )
        # _load_project_summary never returns None
        return cast(ProjectTaskSummary, summary)

    async def _load_project_summary(self, project_id: str) -> ProjectTaskSummary:
        result = await self.db.execute(
            select(Task.status, func.count(Task.id))
            .where(Task.project_id == project_id)
            .group_by(Task.status)
        )
        counts: dict[str, int] = dict(result.all())
        return ProjectTaskSummary(
            project_id=project_id,
            todo=counts.get(TaskStatus.TODO.value, 0),
            in_progress=counts.get(TaskStatus.IN_PROGRESS.value, 0),
            in_review=counts.get(TaskStatus.IN_REVIEW.value, 0),
            done=counts.get(TaskStatus.DONE.value, 0),
        )

    async def create_task(
        self,
        organization_id: str,
        title: str,
        *,
        workspace_id: str | None = None,
        project_id: str | None = None,
        description: str | None = None,
        status: TaskStatus = TaskStatus.TODO,
        priority: str = "MEDIUM",
        due_date: datetime | None = None,
        assigned_by: str | None = None,
    ) -> TaskResult:
        task = Task(
            organization_id=organization_id,
            workspace_id=workspace_id,
            project_id=project_id,
            title=title,
            description=description,
            status=status.value,
            priority=priority,
            due_date=due_date,
            assigned_by=assigned_by,
            completed_at=utc_now() if status is TaskStatus.DONE else None,
        )
        return await self._create(task)

    async def update_task(self, task_id: str, **changes: Any) -> TaskResult:
        """Update task; moving into DONE stamps completed_at, leaving DONE clears it."""
        task = await self.require_entity(task_id)
        was_done = task.status == TaskStatus.DONE.value
        self._apply_changes(task, changes)
        is_done = task.status == TaskStatus.DONE.value
        if is_done and not was_done:
            task.completed_at = utc_now()
        elif was_done and not is_done:
            task.completed_at = None
        return await self._save(task)

    def _dependents(self, entity_id: str) -> list[Dependent]:
        # document.task_id is SET NULL
        return [(Document, "document", Document.task_id == entity_id)]

    async def delete_task(self, task_id: str) -> None:
        await self.delete_by_id(task_id)

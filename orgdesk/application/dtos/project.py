"""DTOs for projects and tasks (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import date, datetime

from orgdesk.domain.enums import TaskStatus


@dataclass(frozen=True)
class ProjectResult:
    """Project read-model. slug is unique inside its workspace."""

    id: str
    organization_id: str
    workspace_id: str
    name: str
    slug: str
    description: str | None
    status: str
    start_date: date | None
    end_date: date | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TaskResult:
    id: str
    organization_id: str
    workspace_id: str | None
    project_id: str | None
    title: str
    description: str | None
    status: TaskStatus
    priority: str
    due_date: datetime | None
    assigned_by: str | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProjectTaskSummary:
    """Task counts per status for one project (aggregate cache)."""

    project_id: str
    todo: int
    in_progress: int
    in_review: int
    done: int

    @property
    def total(self) -> int:
        return self.todo + self.in_progress + self.in_review + self.done

"""Task ORM model. Belongs to an organization, optionally to a workspace and project."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.domain.enums import TaskStatus
from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class Task(OrganizationScopedModel, Base):
    """Table: task. completed_at is set when status becomes DONE."""

    __tablename__ = "task"

    workspace_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("workspace.id", ondelete="CASCADE"), nullable=True, index=True
    )
    project_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("project.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskStatus.TODO.value
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default="MEDIUM", server_default="MEDIUM"
    )
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    assigned_by: Mapped[str | None] = mapped_column(String, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("ix_task_org_due", "organization_id", "due_date"),
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{v}'" for v in TaskStatus.values())),
            name="task_status_check",
        ),
    )

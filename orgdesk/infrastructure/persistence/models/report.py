"""Report and report template ORM models."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from orgdesk.domain.enums import ReportStatus
from orgdesk.infrastructure.persistence.database import Base
from orgdesk.infrastructure.persistence.models.mixins import OrganizationScopedModel


class ReportTemplate(OrganizationScopedModel, Base):
    """Table: report_template. fields describes the form (list of field specs)."""

    __tablename__ = "report_template"

    workspace_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("workspace.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    fields: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )


class Report(OrganizationScopedModel, Base):
    """Table: report. content holds the filled-in template values."""

    __tablename__ = "report"

    workspace_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("workspace.id", ondelete="CASCADE"), nullable=True, index=True
    )
    template_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("report_template.id", ondelete="SET NULL"), nullable=True
    )
    author_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ReportStatus.DRAFT.value, index=True
    )
    submitted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reviewed_by: Mapped[str | None] = mapped_column(String, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{v}'" for v in ReportStatus.values())),
            name="report_status_check",
        ),
    )

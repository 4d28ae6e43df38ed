"""DTOs for reports and report templates (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from orgdesk.domain.enums import ReportStatus


@dataclass(frozen=True)
class ReportResult:
    """Report read-model. Lifecycle: DRAFT -> SUBMITTED -> APPROVED | REJECTED."""

    id: str
    organization_id: str
    workspace_id: str | None
    template_id: str | None
    author_id: str
    title: str
    content: dict[str, Any]
    status: ReportStatus
    submitted_at: datetime | None
    reviewed_by: str | None
    reviewed_at: datetime | None
    review_note: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ReportTemplateResult:
    id: str
    organization_id: str
    workspace_id: str | None
    name: str
    description: str | None
    fields: list[dict[str, Any]]
    is_active: bool
    created_at: datetime
    updated_at: datetime

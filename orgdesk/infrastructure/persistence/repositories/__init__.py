"""Repositories: durable-store access with read-through caching."""

from orgdesk.infrastructure.persistence.repositories.attendance_repo import (
    AttendanceRepository,
)
from orgdesk.infrastructure.persistence.repositories.base import BaseRepository
from orgdesk.infrastructure.persistence.repositories.cached_repo import CachedRepository
from orgdesk.infrastructure.persistence.repositories.dashboard_repo import (
    DashboardRepository,
)
from orgdesk.infrastructure.persistence.repositories.department_repo import (
    DepartmentRepository,
)
from orgdesk.infrastructure.persistence.repositories.document_repo import (
    DocumentRepository,
)
from orgdesk.infrastructure.persistence.repositories.invitation_repo import (
    InvitationRepository,
)
from orgdesk.infrastructure.persistence.repositories.leave_request_repo import (
    LeaveRequestRepository,
)
from orgdesk.infrastructure.persistence.repositories.notification_repo import (
    NotificationRepository,
)
from orgdesk.infrastructure.persistence.repositories.organization_repo import (
    OrganizationRepository,
)
from orgdesk.infrastructure.persistence.repositories.project_repo import (
    ProjectRepository,
)
from orgdesk.infrastructure.persistence.repositories.report_repo import ReportRepository
from orgdesk.infrastructure.persistence.repositories.report_template_repo import (
    ReportTemplateRepository,
)
from orgdesk.infrastructure.persistence.repositories.staff_repo import StaffRepository
from orgdesk.infrastructure.persistence.repositories.task_repo import TaskRepository
from orgdesk.infrastructure.persistence.repositories.user_repo import UserRepository
from orgdesk.infrastructure.persistence.repositories.workspace_repo import (
    WorkspaceRepository,
)

__all__ = [
    "AttendanceRepository",
    "BaseRepository",
    "CachedRepository",
    "DashboardRepository",
    "DepartmentRepository",
    "DocumentRepository",
    "InvitationRepository",
    "LeaveRequestRepository",
    "NotificationRepository",
    "OrganizationRepository",
    "ProjectRepository",
    "ReportRepository",
    "ReportTemplateRepository",
    "StaffRepository",
    "TaskRepository",
    "UserRepository",
    "WorkspaceRepository",
]

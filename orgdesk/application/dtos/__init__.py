"""Application DTOs (read models). Frozen dataclasses; no ORM dependency."""

from orgdesk.application.dtos.attendance import AttendanceResult, LeaveRequestResult
from orgdesk.application.dtos.dashboard import DashboardSummary
from orgdesk.application.dtos.document import DocumentResult
from orgdesk.application.dtos.invitation import InvitationResult
from orgdesk.application.dtos.notification import NotificationResult
from orgdesk.application.dtos.organization import OrganizationResult, WorkspaceResult
from orgdesk.application.dtos.project import ProjectResult, ProjectTaskSummary, TaskResult
from orgdesk.application.dtos.report import ReportResult, ReportTemplateResult
from orgdesk.application.dtos.staff import DepartmentResult, StaffResult
from orgdesk.application.dtos.user import UserResult

__all__ = [
    "AttendanceResult",
    "DashboardSummary",
    "DepartmentResult",
    "DocumentResult",
    "InvitationResult",
    "LeaveRequestResult",
    "NotificationResult",
    "OrganizationResult",
    "ProjectResult",
    "ProjectTaskSummary",
    "ReportResult",
    "ReportTemplateResult",
    "StaffResult",
    "TaskResult",
    "UserResult",
    "WorkspaceResult",
]

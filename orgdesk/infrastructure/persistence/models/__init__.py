"""Persistence models: ORM entities and mixins."""

from orgdesk.infrastructure.persistence.models.attendance import Attendance
from orgdesk.infrastructure.persistence.models.department import Department
from orgdesk.infrastructure.persistence.models.document import Document
from orgdesk.infrastructure.persistence.models.invitation import Invitation
from orgdesk.infrastructure.persistence.models.leave_request import LeaveRequest
from orgdesk.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OrganizationMixin,
    OrganizationScopedModel,
    TimestampMixin,
)
from orgdesk.infrastructure.persistence.models.notification import Notification
from orgdesk.infrastructure.persistence.models.organization import Organization
from orgdesk.infrastructure.persistence.models.project import Project
from orgdesk.infrastructure.persistence.models.report import Report, ReportTemplate
from orgdesk.infrastructure.persistence.models.staff import Staff
from orgdesk.infrastructure.persistence.models.task import Task
from orgdesk.infrastructure.persistence.models.user import User
from orgdesk.infrastructure.persistence.models.workspace import Workspace

__all__ = [
    "Attendance",
    "CuidMixin",
    "Department",
    "Document",
    "Invitation",
    "LeaveRequest",
    "Notification",
    "Organization",
    "OrganizationMixin",
    "OrganizationScopedModel",
    "Project",
    "Report",
    "ReportTemplate",
    "Staff",
    "Task",
    "TimestampMixin",
    "User",
    "Workspace",
]

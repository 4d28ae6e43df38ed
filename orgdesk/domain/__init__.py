"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from orgdesk.domain.enums import (
    AttendanceStatus,
    InvitationStatus,
    LeaveStatus,
    OrganizationRole,
    ReportStatus,
    TaskStatus,
)
from orgdesk.domain.exceptions import (
    InvalidStateTransitionException,
    OrgdeskException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    ValidationException,
)

__all__ = [
    # Enums
    "AttendanceStatus",
    "InvitationStatus",
    "LeaveStatus",
    "OrganizationRole",
    "ReportStatus",
    "TaskStatus",
    # Exceptions
    "InvalidStateTransitionException",
    "OrgdeskException",
    "ResourceAlreadyExistsException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "ValidationException",
]

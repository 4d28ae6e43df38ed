"""Domain enumerations for orgdesk.

Enums represent fixed sets of domain values stored as strings.
"""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for CHECK constraints)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class OrganizationRole(_ValuesMixin, str, Enum):
    """Role of a member inside an organization."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"


class AttendanceStatus(_ValuesMixin, str, Enum):
    """Attendance record status."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    ON_LEAVE = "ON_LEAVE"


class LeaveStatus(_ValuesMixin, str, Enum):
    """Leave request lifecycle. Only PENDING requests can be approved or rejected."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class TaskStatus(_ValuesMixin, str, Enum):
    """Task board column."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"


class ReportStatus(_ValuesMixin, str, Enum):
    """Report lifecycle: DRAFT -> SUBMITTED -> APPROVED | REJECTED."""

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class InvitationStatus(_ValuesMixin, str, Enum):
    """Invitation lifecycle."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"
